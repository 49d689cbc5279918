"""
Centralized Configuration System
Environment-aware settings for the CRM store, rule engine and LLM agents.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow"
    )
    """
    Production-grade configuration management.
    Loads from environment variables with sensible defaults.
    """

    # ============================================
    # ANTHROPIC CONFIGURATION
    # ============================================
    # Without a key the agents answer with their fallback responses
    anthropic_api_key: Optional[str] = None

    # ============================================
    # MODEL SELECTION (by agent role)
    # ============================================
    analysis_model: str = "claude-sonnet-4-20250514"
    lead_extraction_model: str = "claude-sonnet-4-20250514"
    analysis_max_tokens: int = 1500

    # ============================================
    # PERSISTENCE
    # ============================================
    snapshot_path: str = "/tmp/pilotcrm-data.json"

    # ============================================
    # API
    # ============================================
    recent_activity_limit: int = 20
    account_brief_activity_limit: int = 6

    # ============================================
    # BUSINESS RULES
    # ============================================
    likelihood_history_weight: float = 0.3
    likelihood_call_weight: float = 0.7
    at_risk_likelihood_threshold: int = 30   # Below this the account is flagged
    high_priority_likelihood: int = 75       # Call likelihood that earns high-priority
    positive_followup_days: int = 2          # Sentiment >= 7
    default_followup_days: int = 5

    # New inbound leads
    new_account_likelihood: int = 25
    new_account_followup_days: int = 3
    new_account_deal_value: float = 24000.0
    new_account_industry: str = "Technology"

    # ============================================
    # OBSERVABILITY
    # ============================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    enable_structured_logging: bool = False  # Set to True for production JSON logs

    # ============================================
    # ENVIRONMENT
    # ============================================
    environment: Literal["development", "staging", "production"] = "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Singleton pattern for settings.
    Uses LRU cache to ensure only one Settings instance exists.
    """
    return Settings()


# Convenience accessor for common use
settings = get_settings()

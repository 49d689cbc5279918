"""
Tests for centralized configuration system.
Verifies environment variable loading and default values.
"""
import pytest
from src.config import Settings, get_settings


class TestConfigurationSystem:
    """Test suite for configuration management."""

    def test_default_values(self, monkeypatch):
        """Verify all configuration fields have sensible defaults."""
        monkeypatch.delenv("SNAPSHOT_PATH", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = Settings(_env_file=None)

        # Models
        assert settings.analysis_model == "claude-sonnet-4-20250514"
        assert settings.analysis_max_tokens == 1500

        # Persistence and API
        assert settings.snapshot_path == "/tmp/pilotcrm-data.json"
        assert settings.recent_activity_limit == 20
        assert settings.account_brief_activity_limit == 6

        # Business rules
        assert settings.likelihood_history_weight == 0.3
        assert settings.likelihood_call_weight == 0.7
        assert settings.at_risk_likelihood_threshold == 30
        assert settings.high_priority_likelihood == 75
        assert settings.positive_followup_days == 2
        assert settings.default_followup_days == 5
        assert settings.new_account_likelihood == 25
        assert settings.new_account_followup_days == 3

        assert settings.log_level == "INFO"
        assert settings.enable_structured_logging is False

    def test_environment_override(self, monkeypatch):
        """Verify environment variables override defaults."""
        monkeypatch.setenv("SNAPSHOT_PATH", "/data/crm.json")
        monkeypatch.setenv("AT_RISK_LIKELIHOOD_THRESHOLD", "40")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")

        settings = Settings(_env_file=None)

        assert settings.snapshot_path == "/data/crm.json"
        assert settings.at_risk_likelihood_threshold == 40
        assert settings.anthropic_api_key == "sk-test"

    def test_settings_singleton(self):
        """Verify get_settings returns the same instance."""
        assert get_settings() is get_settings()

    def test_weights_sum_to_one(self):
        """Blend weights form a convex combination."""
        settings = Settings(_env_file=None)
        assert settings.likelihood_history_weight + settings.likelihood_call_weight == pytest.approx(1.0)

"""
Structured Logging & Observability
Production-grade logging that's both human-readable and machine-parseable.
"""
import sys
from loguru import logger
from typing import Any, Dict
from src.config import get_settings


def configure_logging():
    """
    Configure loguru for production observability.

    In development: Human-readable colorized output
    In production: Structured JSON logs for ingestion (ELK, Datadog, etc.)
    """
    settings = get_settings()

    # Remove default handler
    logger.remove()

    # Development mode: Beautiful console output
    if not settings.enable_structured_logging:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "{message}"
            ),
            level=settings.log_level,
            colorize=True,
        )
    # Production mode: JSON structured logs
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,  # Output as JSON
        )

    logger.info(f"Logging configured: level={settings.log_level}, structured={settings.enable_structured_logging}")


def log_agent_execution(
    agent_name: str,
    action: str,
    duration_ms: float | None = None,
    **context
):
    """
    Structured logging for LLM agent executions.

    Args:
        agent_name: Name of the agent (e.g., "CallAnalystAgent")
        action: What action was performed (e.g., "analyze", "extract")
        duration_ms: Execution time in milliseconds
        **context: Additional context (fallback used, transcript length, etc.)

    Example:
        >>> log_agent_execution(
        ...     agent_name="CallAnalystAgent",
        ...     action="analyze",
        ...     duration_ms=834.5,
        ...     fallback=False
        ... )
    """
    log_data = {
        "agent": agent_name,
        "action": action,
    }

    if duration_ms is not None:
        log_data["duration_ms"] = round(duration_ms, 2)

    log_data.update(context)

    logger.bind(**log_data).info(f"{agent_name} | {action}")


def log_business_event(
    event_type: str,
    account_id: str,
    **details: Dict[str, Any]
):
    """
    Log business-critical events for analytics.

    Examples:
        - Account stage transitions
        - Accounts flagged at-risk
        - Post-call rule engine runs

    Args:
        event_type: Type of event (e.g., "stage_transition", "risk_flagged")
        account_id: The account involved
        **details: Event-specific data
    """
    log_data = {
        "event_type": event_type,
        "account_id": account_id,
        **details
    }

    logger.bind(**log_data).success(f"Business Event: {event_type}")

"""Services package."""
from src.services.pipeline_stats import compute_pipeline_stats
from src.services.post_call_rules import (
    PostCallRuleEngine,
    PostCallSignal,
    PostCallOutcome,
    POST_CALL_RULES,
)
from src.services.crm_actions import CRMActionHandler, InvalidStageError
from src.services.voice_calls import VoiceCallService, InboundCallResult, match_account

__all__ = [
    "compute_pipeline_stats",
    "PostCallRuleEngine",
    "PostCallSignal",
    "PostCallOutcome",
    "POST_CALL_RULES",
    "CRMActionHandler",
    "InvalidStageError",
    "VoiceCallService",
    "InboundCallResult",
    "match_account",
]

"""
FastAPI Dependencies

Accessors for the objects the lifespan places on app.state.
"""

from fastapi import Request, HTTPException, status
from loguru import logger

from src.agents.call_analyst_agent import CallAnalystAgent
from src.repositories.store import CRMStore
from src.services.crm_actions import CRMActionHandler
from src.services.voice_calls import VoiceCallService


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        logger.error(f"❌ app.state.{name} not initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready"
        )
    return value


def get_store(request: Request) -> CRMStore:
    return _state(request, "store")


def get_action_handler(request: Request) -> CRMActionHandler:
    return _state(request, "action_handler")


def get_call_analyst(request: Request) -> CallAnalystAgent:
    return _state(request, "call_analyst")


def get_voice_calls(request: Request) -> VoiceCallService:
    return _state(request, "voice_calls")

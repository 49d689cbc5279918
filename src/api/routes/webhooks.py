"""
Webhook Endpoints

Voice-platform webhook for inbound phone calls. The platform asks for
an assistant config when a call starts and posts a report when it ends.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from src.api.dependencies import get_voice_calls
from src.api.models.vapi import VapiWebhookPayload
from src.services.voice_calls import VoiceCallService

router = APIRouter(prefix="/api/vapi", tags=["Webhooks"])

ASSISTANT_FIRST_MESSAGE = "Hi, you've reached the PilotCRM sales team. How can I help you today?"

ASSISTANT_SYSTEM_PROMPT = """You are Sam, a friendly and professional AI sales assistant for PilotCRM.
You help callers with questions about their accounts, the product, pricing, and next steps.
Keep responses concise and helpful. If you don't know something, offer to have a human rep follow up."""


def build_assistant_config() -> dict:
    """Assistant the voice platform runs for an inbound call."""
    return {
        "assistant": {
            "firstMessage": ASSISTANT_FIRST_MESSAGE,
            "model": {
                "provider": "anthropic",
                "model": "claude-sonnet-4-20250514",
                "messages": [
                    {"role": "system", "content": ASSISTANT_SYSTEM_PROMPT},
                ],
            },
            "voice": {
                "provider": "11labs",
                "voiceId": "21m00Tcm4TlvDq8ikWAM",
            },
        }
    }


@router.post("")
async def vapi_webhook(
    payload: VapiWebhookPayload,
    voice_calls: VoiceCallService = Depends(get_voice_calls)
):
    """
    Voice-platform event handler.

    Flow:
    1. assistant-request: return the assistant config
    2. end-of-call-report: match or create the account, record the call
    3. Anything else (status-update, transcript, ...): acknowledge

    Returns:
        JSON acknowledgment, or {"error": ...} with 500 if recording fails
    """
    event_type = payload.message.type

    if event_type == "assistant-request":
        return build_assistant_config()

    if event_type == "end-of-call-report":
        try:
            result = await voice_calls.record_end_of_call(payload.message)
        except Exception as e:
            logger.exception(f"Vapi webhook error: {e}")
            return JSONResponse(
                status_code=500,
                content={"error": "Webhook processing failed"}
            )
        return {"ok": True, "accountId": result.account.id, "callId": result.call.id}

    logger.debug(f"Vapi event acknowledged: {event_type}")
    return {"ok": True}


@router.get("")
async def vapi_health():
    """Lets the voice platform verify the webhook URL."""
    return {"status": "ok", "service": "pilot-crm-vapi-webhook"}

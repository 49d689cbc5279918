"""
Pydantic models for voice-platform webhook payloads.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class VapiMessage(BaseModel):
    """
    One call-lifecycle event.

    Only `type` is guaranteed; end-of-call reports also carry the
    transcript, a summary and the call length in seconds.
    """
    model_config = ConfigDict(extra='allow')

    type: str = Field(..., description="Event type, e.g. assistant-request or end-of-call-report")
    transcript: Optional[str] = Field(None, description="Full call transcript")
    summary: Optional[str] = Field(None, description="Platform-generated call summary")
    duration: Optional[float] = Field(None, ge=0, description="Call length in seconds")


class VapiWebhookPayload(BaseModel):
    message: VapiMessage

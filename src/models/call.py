import datetime as dt
import math
from typing import List, Optional
from pydantic import BaseModel, Field
from src.models.base import CRMBaseModel, utc_now


class CallSentiment(BaseModel):
    """Score card attached to a recorded call."""
    score: int = Field(..., ge=1, le=10)
    satisfaction: int = Field(..., ge=1, le=10)
    summary: str = ""
    tags: List[str] = Field(default_factory=list)


class CallRecord(CRMBaseModel):
    """A completed call. Never modified after it is recorded."""
    account_id: str
    date: dt.datetime = Field(default_factory=utc_now)
    duration: float = Field(0, ge=0, description="Call length in seconds")
    transcript: str = ""
    sentiment: Optional[CallSentiment] = None
    outcome: str = "Call completed"

    @property
    def duration_minutes(self) -> int:
        return math.floor(self.duration / 60 + 0.5)


class NewCallRecord(BaseModel):
    """Call fields supplied by the caller; the store assigns the id."""
    account_id: str
    date: dt.datetime = Field(default_factory=utc_now)
    duration: float = Field(0, ge=0)
    transcript: str = ""
    sentiment: Optional[CallSentiment] = None
    outcome: str = "Call completed"

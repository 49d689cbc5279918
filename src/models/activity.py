import datetime as dt
from enum import StrEnum
from pydantic import Field
from src.models.base import CRMBaseModel, utc_now


class ActivityType(StrEnum):
    CALL = "call"
    EMAIL = "email"
    NOTE = "note"
    STAGE_CHANGE = "stage_change"
    MEETING = "meeting"


class Activity(CRMBaseModel):
    """
    Append-only log entry.
    Written as a side effect of store mutations; never edited or removed.
    """
    account_id: str
    type: ActivityType
    message: str
    timestamp: dt.datetime = Field(default_factory=utc_now)

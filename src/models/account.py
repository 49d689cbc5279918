import datetime as dt
import math
from enum import StrEnum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.models.base import CRMBaseModel, utc_now


class Plan(StrEnum):
    FREE = "free"
    TEAM = "team"
    ENTERPRISE = "enterprise"


class Stage(StrEnum):
    LEAD = "lead"
    DISCOVERY = "discovery"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"

    @property
    def label(self) -> str:
        """Display label, e.g. "Closed Won"."""
        return self.value.replace("_", " ").title()

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.CLOSED_WON, Stage.CLOSED_LOST)

    @classmethod
    def normalize(cls, raw: object) -> Optional["Stage"]:
        """
        Map free text ("Closed Won", "NEGOTIATION") onto a stage.
        Returns None when it matches none of the six stages.
        """
        candidate = "_".join(str(raw if raw is not None else "").lower().split())
        try:
            return cls(candidate)
        except ValueError:
            return None


# Open pipeline in order; the rule engine moves accounts one step along it
OPEN_STAGES: tuple[Stage, ...] = (
    Stage.LEAD,
    Stage.DISCOVERY,
    Stage.PROPOSAL,
    Stage.NEGOTIATION,
)

AT_RISK_TAG = "at-risk"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_likelihood(value: float) -> int:
    """Whole percent in [0, 100], rounding halves up."""
    return max(0, min(100, round_half_up(value)))


class Account(CRMBaseModel):
    """
    A company in the sales pipeline.

    Invariants held by validation: likelihood within [0, 100],
    stage is a Stage member, tags carry no duplicates.
    """
    company: str
    contact_name: str
    contact_email: str = ""
    contact_role: str = ""
    plan: Plan = Plan.FREE
    stage: Stage = Stage.LEAD
    deal_value: float = Field(..., gt=0)
    likelihood: int = 25
    industry: str = ""
    notes: List[str] = Field(default_factory=list)
    last_contact_date: dt.datetime = Field(default_factory=utc_now)
    next_follow_up: Optional[dt.date] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("likelihood", mode="before")
    @classmethod
    def _clamp_likelihood(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return clamp_likelihood(value)
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @field_validator("next_follow_up", mode="before")
    @classmethod
    def _date_only(cls, value):
        # Older snapshots stored a full ISO timestamp here
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def add_tag(self, tag: str) -> bool:
        """Add a tag. Returns False when it was already present."""
        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> bool:
        """Remove a tag. Returns False when it was absent."""
        if tag not in self.tags:
            return False
        self.tags.remove(tag)
        return True


class NewAccount(BaseModel):
    """Lead fields needed to open a new account."""
    company: str
    contact_name: str
    contact_email: str = ""
    contact_role: str = ""
    industry: str = "Technology"
    deal_value: float = Field(24000.0, gt=0)
    notes: List[str] = Field(default_factory=list)

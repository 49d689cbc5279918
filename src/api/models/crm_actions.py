"""
CRM Action Payloads

Request bodies accepted by POST /api/crm. The `action` field selects the
command; anything else is rejected by validation before reaching a handler.
"""
import datetime as dt
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic.alias_generators import to_camel

from src.models.analysis import CallAnalysis
from src.models.call import CallSentiment


class CRMCommand(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore'
    )


class MoveStageCommand(CRMCommand):
    """Move an account, found by id or company name, to another stage."""
    action: Literal["moveStage"]
    account_id: Optional[str] = None
    company_name: Optional[str] = None
    stage: Optional[str] = None


class AddNoteCommand(CRMCommand):
    action: Literal["addNote"]
    company_name: str = ""
    note: str


class GetAccountBriefCommand(CRMCommand):
    action: Literal["getAccountBrief"]
    company_name: str = ""


class UpdateLikelihoodCommand(CRMCommand):
    action: Literal["updateLikelihood"]
    company_name: str = ""
    likelihood: float


class FlagRiskCommand(CRMCommand):
    action: Literal["flagRisk"]
    company_name: str = ""
    reason: str


class AddCallCommand(CRMCommand):
    """
    Record a finished call and run the post-call rules.

    `analysis` is the analyzer output for the transcript, when one was run.
    """
    action: Literal["addCall"]
    account_id: str
    date: Optional[dt.datetime] = None
    duration: float = Field(0, ge=0)
    transcript: str = ""
    sentiment: Optional[CallSentiment] = None
    outcome: Optional[str] = None
    analysis: Optional[CallAnalysis] = None


class CreateAccountCommand(CRMCommand):
    action: Literal["createAccount"]
    company: str = "Unknown"
    contact_name: str = "Unknown"
    contact_email: str = ""
    contact_role: str = ""
    industry: Optional[str] = None
    deal_value: Optional[float] = Field(None, gt=0)
    notes: List[str] = Field(default_factory=list)


AnyCRMCommand = Annotated[
    Union[
        MoveStageCommand,
        AddNoteCommand,
        GetAccountBriefCommand,
        UpdateLikelihoodCommand,
        FlagRiskCommand,
        AddCallCommand,
        CreateAccountCommand,
    ],
    Field(discriminator="action"),
]


class CRMActionRequest(RootModel[AnyCRMCommand]):
    """Body of POST /api/crm."""
    pass

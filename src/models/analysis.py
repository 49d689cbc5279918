# src/models/analysis.py
from typing import Annotated, Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, WrapValidator
from pydantic.alias_generators import to_camel


def _none_if_invalid(value: Any, handler) -> Any:
    """A field that fails validation reads as absent instead of failing the model."""
    try:
        return handler(value)
    except ValidationError:
        return None


Score = Annotated[Optional[Annotated[int, Field(ge=1, le=10)]], WrapValidator(_none_if_invalid)]
Percentage = Annotated[Optional[Annotated[int, Field(ge=0, le=100)]], WrapValidator(_none_if_invalid)]
TextList = Annotated[Optional[List[str]], WrapValidator(_none_if_invalid)]
Text = Annotated[Optional[str], WrapValidator(_none_if_invalid)]


class AnalysisModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore'
    )


class AnalysisReasoning(AnalysisModel):
    sentiment_reasoning: Text = None
    satisfaction_reasoning: Text = None
    likelihood_reasoning: Text = None


class CallAnalysis(AnalysisModel):
    """
    Structured read of a sales call transcript.

    Produced by the call analyst agent and consumed by the post-call
    rule engine. Every field is optional; malformed values become None.
    """
    overall_sentiment: Score = Field(None, description="1 (hostile) to 10 (enthusiastic)")
    customer_satisfaction: Score = None
    likelihood_to_close: Percentage = Field(None, description="0-100 chance the deal closes")
    pain_points: TextList = Field(None, description="Direct quotes from the transcript")
    positive_signals: TextList = None
    objections_raised: TextList = None
    next_steps: TextList = None
    summary: Text = Field(None, description="One sentence summary")
    reasoning: Annotated[Optional[AnalysisReasoning], WrapValidator(_none_if_invalid)] = None


class ExtractedLead(AnalysisModel):
    """Lead fields pulled out of an inbound call with an unknown caller."""
    company: str
    contact_name: str
    contact_email: str = ""
    contact_role: str = ""
    industry: str = "Technology"
    deal_value: float = Field(24000.0, gt=0)
    notes: List[str] = Field(default_factory=list)

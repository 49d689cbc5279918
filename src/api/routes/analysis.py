"""
Transcript Analysis Endpoint
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.agents.call_analyst_agent import CallAnalystAgent
from src.api.dependencies import get_call_analyst

router = APIRouter(prefix="/api", tags=["Analysis"])


class AnalyzeSentimentRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transcript: str = ""
    contact_name: str = "the customer"


@router.post("/analyze-sentiment")
async def analyze_sentiment(
    body: AnalyzeSentimentRequest,
    analyst: CallAnalystAgent = Depends(get_call_analyst)
):
    """
    Score a call transcript.

    Always answers 200: without a configured model, or when the model
    fails, the response is the fixed fallback analysis.
    """
    analysis = await analyst.analyze(body.transcript, body.contact_name)
    return analysis.model_dump(mode="json", by_alias=True)

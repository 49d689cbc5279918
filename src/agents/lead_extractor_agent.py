import time
from pydantic_ai import Agent
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from loguru import logger
from src.config import get_settings
from src.models.analysis import ExtractedLead
from src.utils.fallback_responses import get_fallback_lead
from src.utils.llm_client import run_agent_with_fallback
from src.utils.observability import log_agent_execution


class LeadExtractorAgent:
    """Pulls company and contact details out of an inbound call transcript."""

    INSTRUCTIONS = (
        "You extract lead details from inbound sales call transcripts. "
        "Return the caller's company, name, email, role and industry exactly "
        "as stated. Leave a field empty rather than guessing. "
        "Estimate dealValue in USD per year only if the caller mentions team "
        "size or budget; otherwise use 24000. "
        "notes holds up to three short facts worth remembering."
    )

    def __init__(self, agent: Agent | None = None, model_override: str | None = None):
        settings = get_settings()
        model_name = model_override or settings.lead_extraction_model

        if agent is not None:
            self.agent = agent
        elif settings.anthropic_api_key:
            self.agent: Agent[None, ExtractedLead] = Agent(
                AnthropicModel(
                    model_name,
                    provider=AnthropicProvider(api_key=settings.anthropic_api_key)
                ),
                output_type=ExtractedLead,
                instructions=self.INSTRUCTIONS,
            )
        else:
            self.agent = None

        logger.info(f"LeadExtractorAgent initialized with model: {model_name}")

    async def extract(self, transcript: str) -> ExtractedLead:
        """Extract lead fields; the placeholder lead on any failure."""
        if self.agent is None or not transcript.strip():
            return get_fallback_lead()

        start = time.perf_counter()
        lead = await run_agent_with_fallback(
            self.agent,
            f"INBOUND CALL TRANSCRIPT:\n{transcript}",
            get_fallback_lead,
        )

        log_agent_execution(
            agent_name="LeadExtractorAgent",
            action="extract",
            duration_ms=(time.perf_counter() - start) * 1000,
            company=lead.company,
        )
        return lead

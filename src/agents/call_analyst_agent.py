import time
from pydantic_ai import Agent
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from loguru import logger
from src.config import get_settings
from src.models.analysis import CallAnalysis
from src.utils.fallback_responses import get_fallback_analysis
from src.utils.llm_client import run_agent_with_fallback
from src.utils.observability import log_agent_execution


class CallAnalystAgent:
    """
    Reads a sales call transcript and scores it.

    Without an API key, or with an empty transcript, it answers with the
    fixed fallback analysis instead of calling the model.
    """

    INSTRUCTIONS = (
        "You are a sales call analyst for a B2B SaaS company. "
        "Score the call from the transcript alone. "
        "overallSentiment and customerSatisfaction run from 1 to 10, "
        "likelihoodToClose from 0 to 100. "
        "painPoints and positiveSignals are direct quotes from the transcript; "
        "objectionsRaised are brief descriptions; nextSteps are action items. "
        "summary is one sentence. Cite the transcript in every reasoning field."
    )

    def __init__(self, agent: Agent | None = None, model_override: str | None = None):
        settings = get_settings()
        model_name = model_override or settings.analysis_model

        # Allow dependency injection for testing
        if agent is not None:
            self.agent = agent
        elif settings.anthropic_api_key:
            self.agent: Agent[None, CallAnalysis] = Agent(
                AnthropicModel(
                    model_name,
                    provider=AnthropicProvider(api_key=settings.anthropic_api_key)
                ),
                output_type=CallAnalysis,
                instructions=self.INSTRUCTIONS,
                model_settings={"max_tokens": settings.analysis_max_tokens},
            )
        else:
            self.agent = None
            logger.warning("ANTHROPIC_API_KEY not configured, call analysis will use fallback")

        logger.info(f"CallAnalystAgent initialized with model: {model_name}")

    async def analyze(self, transcript: str, contact_name: str = "the customer") -> CallAnalysis:
        """
        Analyze a call between a rep and `contact_name`.

        Never raises: model failures return the fallback analysis.
        """
        if self.agent is None or not transcript.strip():
            return get_fallback_analysis()

        prompt = f"""
        Analyze this sales call transcript between a rep and {contact_name}.

        TRANSCRIPT:
        {transcript}
        """

        start = time.perf_counter()
        analysis = await run_agent_with_fallback(self.agent, prompt, get_fallback_analysis)

        log_agent_execution(
            agent_name="CallAnalystAgent",
            action="analyze",
            duration_ms=(time.perf_counter() - start) * 1000,
            transcript_chars=len(transcript),
        )
        return analysis

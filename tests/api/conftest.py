import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from src.api.main import app
from src.models.analysis import ExtractedLead
from src.services.crm_actions import CRMActionHandler
from src.services.post_call_rules import PostCallRuleEngine
from src.services.voice_calls import VoiceCallService
from src.utils.fallback_responses import get_fallback_analysis


@pytest.fixture
def mock_call_analyst():
    analyst = MagicMock()
    analyst.analyze = AsyncMock(return_value=get_fallback_analysis())
    return analyst


@pytest.fixture
def mock_extractor():
    extractor = MagicMock()
    extractor.extract = AsyncMock(return_value=ExtractedLead(company="Globex", contact_name="Hank Scorpio"))
    return extractor


@pytest.fixture
def client(store, mock_call_analyst, mock_extractor):
    """Test client with app.state wired to a tmp_path-backed store."""
    engine = PostCallRuleEngine(store)
    app.state.store = store
    app.state.action_handler = CRMActionHandler(store, engine)
    app.state.call_analyst = mock_call_analyst
    app.state.voice_calls = VoiceCallService(store, mock_extractor)
    return TestClient(app)

"""
FastAPI Application

Main entry point for the PilotCRM API.
Handles application lifecycle and router mounting.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from loguru import logger

from src.agents.call_analyst_agent import CallAnalystAgent
from src.agents.lead_extractor_agent import LeadExtractorAgent
from src.config import settings
from src.repositories import CRMStore, SnapshotFile
from src.services.crm_actions import CRMActionHandler
from src.services.post_call_rules import PostCallRuleEngine
from src.services.voice_calls import VoiceCallService
from src.utils.observability import configure_logging
from src.api.routes import health_router, crm_router, analysis_router, webhooks_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle: startup and shutdown events.

    Startup:
    - Load the CRM store from its snapshot (or the seed data)
    - Wire the rule engine, action handler and LLM agents

    Shutdown:
    - Write a final snapshot
    """
    configure_logging()
    logger.info("Starting PilotCRM API server...")

    store = CRMStore(SnapshotFile(settings.snapshot_path))
    store.load()

    engine = PostCallRuleEngine(store)

    # Store in app state for access in routes
    app.state.store = store
    app.state.action_handler = CRMActionHandler(store, engine)
    app.state.call_analyst = CallAnalystAgent()
    app.state.voice_calls = VoiceCallService(store, LeadExtractorAgent())

    logger.info("API server ready")

    yield

    logger.info("Shutting down API server...")
    store.persist()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="PilotCRM API",
    description="Sales pipeline CRM with post-call automation",
    version="0.1.0",
    lifespan=lifespan
)

# Mount routers
app.include_router(health_router)
app.include_router(crm_router)
app.include_router(analysis_router)
app.include_router(webhooks_router)

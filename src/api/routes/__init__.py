"""
API Routes

Modular route definitions for the PilotCRM API.
"""
from src.api.routes.health import router as health_router
from src.api.routes.crm import router as crm_router
from src.api.routes.analysis import router as analysis_router
from src.api.routes.webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "crm_router",
    "analysis_router",
    "webhooks_router",
]

"""
Health and Readiness Endpoints

Kubernetes-compatible health probes for load balancers and orchestration.
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["Health"])

# API version - single source of truth
API_VERSION = "0.1.0"


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint.

    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": "pilot-crm",
        "version": API_VERSION
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """
    Readiness probe - checks if the CRM store has been loaded.

    Returns 200 if ready, 503 if not ready.
    """
    store = getattr(request.app.state, "store", None)
    if store is None or not store.loaded:
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "reason": "CRM store not loaded"
            }
        )

    return {
        "status": "ready",
        "accounts": len(store.get_accounts()),
        "snapshot": str(store.snapshot.path)
    }


@router.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "PilotCRM API",
        "version": API_VERSION,
        "endpoints": {
            "health": "/health",
            "ready": "/ready",
            "crm": "/api/crm (GET, POST)",
            "analyze_sentiment": "/api/analyze-sentiment (POST)",
            "vapi_webhook": "/api/vapi (GET, POST)"
        }
    }

"""
CRM Endpoints

Dashboard read model and the command endpoint used by the chat sidebar.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from src.api.dependencies import get_action_handler, get_store
from src.api.models.crm_actions import CRMActionRequest
from src.config import settings
from src.repositories.store import AccountNotFoundError, CRMStore
from src.services.crm_actions import CRMActionHandler, InvalidStageError
from src.services.pipeline_stats import compute_pipeline_stats

router = APIRouter(prefix="/api/crm", tags=["CRM"])


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "message": message}
    )


@router.get("")
async def get_crm_state(store: CRMStore = Depends(get_store)):
    """
    Full CRM state for the dashboard.

    Returns all accounts and calls, the newest activities and the
    pipeline statistics computed from the current accounts.
    """
    accounts = store.get_accounts()
    return {
        "accounts": [a.to_payload() for a in accounts],
        "calls": [c.to_payload() for c in store.get_all_calls()],
        "activities": [
            a.to_payload()
            for a in store.get_recent_activities(settings.recent_activity_limit)
        ],
        "stats": compute_pipeline_stats(accounts).model_dump(mode="json", by_alias=True),
    }


@router.post("")
async def run_crm_action(
    body: CRMActionRequest,
    handler: CRMActionHandler = Depends(get_action_handler)
):
    """
    Execute one CRM command.

    Body: {"action": "<command>", ...command fields}

    Returns:
        The command's response body, or the error envelope with
        404 (unknown account), 400 (invalid stage) or 500
    """
    command = body.root
    try:
        return handler.handle(command)

    except AccountNotFoundError as e:
        logger.warning(f"CRM action {command.action} failed: {e}")
        return error_response(404, str(e))

    except InvalidStageError as e:
        logger.warning(f"CRM action {command.action} failed: {e}")
        return error_response(400, str(e))

    except Exception as e:
        logger.exception(f"[CRM API] Error in {command.action}: {e}")
        return error_response(500, "Internal error")

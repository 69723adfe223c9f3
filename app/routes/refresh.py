from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.auth_utils import get_bearer_token
from app.engine import get_engine
from core.proximity import RefreshStatus

router = APIRouter()


@router.post("/refresh")
async def refresh(request: Request):
    """
    Single entry point for pull-to-refresh and screen-focus refreshes.

    A refresh that arrives while a cycle is running is dropped (409).
    """
    coordinator = get_engine().coordinator
    outcome = await coordinator.trigger_refresh(get_bearer_token(request))
    status_code = 409 if outcome.status is RefreshStatus.DROPPED else 200
    return JSONResponse(outcome.to_dict(), status_code=status_code)


@router.get("/refresh/status")
def refresh_status():
    coordinator = get_engine().coordinator
    last = coordinator.last_outcome
    return {
        "state": coordinator.state.value,
        "cached_postings": len(coordinator.cache),
        "last_outcome": last.to_dict() if last else None,
    }

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from app.auth_utils import get_current_identity
from core.database import get_alert_deliveries_for_user

router = APIRouter()


@router.get("/my-alerts")
async def my_alerts(request: Request, limit: int = 200):
    """Alert history for the caller, newest first."""
    identity, _ = await get_current_identity(request)
    deliveries = await run_in_threadpool(
        get_alert_deliveries_for_user,
        user_id=identity.user_id,
        limit=max(1, min(limit, 500)),
    )
    return {"user_id": identity.user_id, "alerts": deliveries}

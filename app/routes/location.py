from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.engine import get_engine

router = APIRouter()


class LocationReport(BaseModel):
    latitude: float
    longitude: float


class PermissionAnswer(BaseModel):
    granted: bool


@router.post("/location")
def report_location(report: LocationReport):
    try:
        position = get_engine().provider.report(report.latitude, report.longitude)
    except ValueError as exc:
        return JSONResponse({"error": {"code": "invalid_location", "message": str(exc)}}, status_code=422)
    return {
        "latitude": position.latitude,
        "longitude": position.longitude,
        "captured_at": position.captured_at.isoformat(timespec="seconds"),
    }


@router.post("/location/permission")
def answer_permission(answer: PermissionAnswer):
    """
    Record the device's permission answer.

    A grant is the external re-grant that lets the tracker ask again after a
    denial; a revocation makes later cycles fail with permission_denied.
    """
    engine = get_engine()
    engine.provider.set_permission(answer.granted)
    if answer.granted:
        engine.tracker.reset_permission()
    else:
        engine.tracker.deny_permission()
    return {"granted": answer.granted}

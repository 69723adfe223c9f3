from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.engine import get_engine

router = APIRouter()


class RadiusUpdate(BaseModel):
    radius_km: float | str


@router.get("/radius")
def get_radius():
    radius_config = get_engine().radius_config
    return {"radius_km": radius_config.get_radius_km(), "default_km": radius_config.default_km}


@router.put("/radius")
def set_radius(update: RadiusUpdate):
    try:
        value = get_engine().radius_config.set_radius_km(update.radius_km)
    except ValueError as exc:
        return JSONResponse({"error": {"code": "invalid_radius", "message": str(exc)}}, status_code=422)
    return {"radius_km": value, "message": f"Notification radius set to {value:g} KM"}

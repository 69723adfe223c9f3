from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.auth_utils import get_bearer_token
from app.engine import get_engine
from core.proximity.notifications import get_push_token, save_push_token

router = APIRouter()


class AccountUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class PushTokenUpdate(BaseModel):
    token: str


@router.put("/account")
async def update_account(update: AccountUpdate, request: Request):
    identity = await get_engine().accounts.update_account(
        get_bearer_token(request),
        username=update.username,
        email=update.email,
        password=update.password,
    )
    return {"user_id": identity.user_id, "username": identity.username, "email": identity.email}


@router.get("/push-token")
def read_push_token():
    return {"token": get_push_token(get_engine().store)}


@router.put("/push-token")
def set_push_token(update: PushTokenUpdate):
    try:
        token = save_push_token(get_engine().store, update.token)
    except ValueError as exc:
        return JSONResponse({"error": {"code": "invalid_token", "message": str(exc)}}, status_code=422)
    return {"token": token}

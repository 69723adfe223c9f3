"""
Posting mutations forwarded to the remote job directory.

These never touch the local job cache; the next refresh picks the changes up.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Request

from app.auth_utils import get_bearer_token, get_current_identity
from app.engine import get_engine

router = APIRouter()


@router.get("/jobs/mine")
async def my_jobs(request: Request):
    identity, token = await get_current_identity(request)
    postings = await get_engine().directory.list_postings_for_user(identity.user_id, token)
    return {"jobs": [p.to_dict() for p in postings]}


@router.post("/jobs", status_code=201)
async def create_job(request: Request, fields: Dict[str, Any] = Body(...)):
    return await get_engine().directory.create_posting(fields, get_bearer_token(request))


@router.put("/jobs/{job_id}")
async def update_job(job_id: str, request: Request, fields: Dict[str, Any] = Body(...)):
    return await get_engine().directory.update_posting(job_id, fields, get_bearer_token(request))


@router.delete("/jobs/{job_id}")
async def delete_job(job_id: str, request: Request):
    return await get_engine().directory.delete_posting(job_id, get_bearer_token(request))

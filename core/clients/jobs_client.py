"""
Client for the remote job directory.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from core.clients.http import ServiceClient
from core.proximity.errors import FetchFailed
from core.proximity.models import JobPosting

logger = logging.getLogger(__name__)


def _parse_postings(data: Any) -> List[JobPosting]:
    """
    Accept either a bare list or an object wrapping it under "jobs"/"data".

    Entries without an id are skipped; order is preserved.
    """
    if isinstance(data, dict):
        data = data.get("jobs", data.get("data"))
    if not isinstance(data, list):
        raise FetchFailed("Job directory returned an unexpected payload")

    postings: List[JobPosting] = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        try:
            postings.append(JobPosting.from_dict(raw))
        except ValueError:
            logger.warning("Skipping job posting without id")
    return postings


class JobDirectoryClient(ServiceClient):
    async def list_postings(self) -> List[JobPosting]:
        return _parse_postings(await self._read("/api/jobs"))

    async def list_postings_for_user(self, user_id: str, token: Optional[str] = None) -> List[JobPosting]:
        return _parse_postings(await self._read(f"/api/jobs/user/{user_id}", token=token))

    async def create_posting(self, fields: Dict[str, Any], token: Optional[str]) -> Dict[str, Any]:
        return await self._mutate("POST", "/api/jobs", token=token, json=fields)

    async def update_posting(self, job_id: str, fields: Dict[str, Any], token: Optional[str]) -> Dict[str, Any]:
        """Partial update: only the given fields are sent."""
        return await self._mutate("PUT", f"/api/jobs/{job_id}", token=token, json=fields)

    async def delete_posting(self, job_id: str, token: Optional[str]) -> Dict[str, Any]:
        return await self._mutate("DELETE", f"/api/jobs/{job_id}", token=token)


__all__ = ["JobDirectoryClient"]

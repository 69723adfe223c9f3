"""
Refresh cycle orchestration: acquire position, fetch postings, match, dispatch.

Cycles are externally triggered (pull-to-refresh, screen focus) through
trigger_refresh(). At most one cycle runs at a time; a request that arrives
while a cycle is in flight is dropped, not queued.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Protocol, Tuple, TypeVar

from core.config import REFRESH_TIMEOUT_SECONDS
from core.proximity.cache import JobCache
from core.proximity.dispatcher import AlertDispatcher
from core.proximity.errors import ProximityError, RefreshTimeout, Unauthorized
from core.proximity.location import LocationTracker
from core.proximity.matcher import match
from core.proximity.models import Identity, JobPosting, Position
from core.proximity.notifications import NotificationSink
from core.proximity.radius import RadiusConfig

log = logging.getLogger(__name__)

T = TypeVar("T")


class RefreshState(str, Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    FETCHING = "fetching"
    MATCHING = "matching"
    DISPATCHING = "dispatching"
    FAILED = "failed"


class RefreshStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    DROPPED = "dropped"


class PostingSource(Protocol):
    async def list_postings(self) -> List[JobPosting]:
        ...


class IdentityResolver(Protocol):
    async def resolve_identity(self, token: Optional[str]) -> Identity:
        ...


@dataclass
class RefreshOutcome:
    status: RefreshStatus
    matched_ids: List[str] = field(default_factory=list)
    notified_ids: List[str] = field(default_factory=list)
    error: Optional[ProximityError] = None
    state: RefreshState = RefreshState.IDLE
    identity: Optional[Identity] = None

    @property
    def ok(self) -> bool:
        return self.status is RefreshStatus.COMPLETED

    def to_dict(self) -> dict:
        data = {
            "status": self.status.value,
            "matched": list(self.matched_ids),
            "notified": list(self.notified_ids),
        }
        if self.error is not None:
            data["error"] = {"code": self.error.code, "message": str(self.error)}
        if self.status is RefreshStatus.DROPPED:
            data["state"] = self.state.value
        return data


class RefreshCoordinator:
    """
    Drives refresh cycles for the single account this engine serves.

    The location provider, radius preference and job cache all belong to one
    device, so the engine is bound to one account: owner_id if given, else the
    first identity a cycle resolves. A cycle whose credential resolves to any
    other account fails with Unauthorized before the cache is touched.
    """

    def __init__(
        self,
        *,
        tracker: LocationTracker,
        directory: PostingSource,
        accounts: IdentityResolver,
        radius_config: RadiusConfig,
        sink_factory: Callable[[Identity], NotificationSink],
        cache: Optional[JobCache] = None,
        dispatcher: Optional[AlertDispatcher] = None,
        timeout_seconds: float = REFRESH_TIMEOUT_SECONDS,
        owner_id: Optional[str] = None,
    ):
        self.tracker = tracker
        self.directory = directory
        self.accounts = accounts
        self.radius_config = radius_config
        self.sink_factory = sink_factory
        self.cache = cache if cache is not None else JobCache()
        self.dispatcher = dispatcher or AlertDispatcher()
        self.timeout_seconds = timeout_seconds

        self._state = RefreshState.IDLE
        self._owner_id = owner_id
        self.last_outcome: Optional[RefreshOutcome] = None

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    def _transition(self, state: RefreshState) -> None:
        log.debug("Refresh state %s -> %s", self._state.value, state.value)
        self._state = state

    async def _bounded(self, awaitable: Awaitable[T], step: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise RefreshTimeout(f"{step} did not finish within {self.timeout_seconds:g}s") from exc

    async def trigger_refresh(self, credential: Optional[str] = None) -> RefreshOutcome:
        """
        Run one cycle unless one is already running.

        Returns a "dropped" outcome (and touches nothing) when not idle. Cycle
        errors come back as a "failed" outcome; the coordinator is always idle
        again when this returns or raises.
        """
        # No await before this transition, so the check-and-set cannot interleave.
        if self._state is not RefreshState.IDLE:
            log.info("Refresh dropped; cycle already running", extra={"state": self._state.value})
            return RefreshOutcome(status=RefreshStatus.DROPPED, state=self._state)

        self._transition(RefreshState.ACQUIRING)
        try:
            outcome = await self._run_cycle(credential)
        except ProximityError as exc:
            self._transition(RefreshState.FAILED)
            log.warning("Refresh cycle failed", extra={"code": exc.code, "error": str(exc)})
            outcome = RefreshOutcome(status=RefreshStatus.FAILED, error=exc)
        finally:
            self._transition(RefreshState.IDLE)

        self.last_outcome = outcome
        return outcome

    async def _fetch(self, credential: Optional[str]) -> Tuple[List[JobPosting], Identity]:
        """Fetch postings and resolve the caller concurrently; neither call outlives this method."""
        postings_task = asyncio.ensure_future(self.directory.list_postings())
        identity_task = asyncio.ensure_future(self.accounts.resolve_identity(credential))
        try:
            return await self._bounded(asyncio.gather(postings_task, identity_task), "fetch")
        finally:
            for task in (postings_task, identity_task):
                if not task.done():
                    task.cancel()
            await asyncio.gather(postings_task, identity_task, return_exceptions=True)

    def _check_owner(self, identity: Identity) -> None:
        if self._owner_id is None:
            self._owner_id = identity.user_id
            log.info("Engine bound to account", extra={"user_id": identity.user_id})
        elif identity.user_id != self._owner_id:
            raise Unauthorized("Credential belongs to a different account than this engine serves")

    async def _run_cycle(self, credential: Optional[str]) -> RefreshOutcome:
        position: Position = await self._bounded(self.tracker.acquire(), "location")

        self._transition(RefreshState.FETCHING)
        postings, identity = await self._fetch(credential)
        self._check_owner(identity)
        self.cache.replace(postings)

        # Storage-backed steps run in worker threads so a slow database cannot block the loop.
        self._transition(RefreshState.MATCHING)
        radius_km = await self._bounded(asyncio.to_thread(self.radius_config.get_radius_km), "radius")
        matches = match(position, radius_km, self.cache.postings())

        self._transition(RefreshState.DISPATCHING)
        sink = self.sink_factory(identity)
        notified = await self._bounded(
            asyncio.to_thread(self.dispatcher.dispatch, matches, self.cache, sink),
            "dispatch",
        )

        log.info(
            "Refresh cycle complete",
            extra={
                "postings": len(postings),
                "radius_km": radius_km,
                "matched": len(matches),
                "notified": len(notified),
            },
        )
        return RefreshOutcome(
            status=RefreshStatus.COMPLETED,
            matched_ids=[p.id for p in matches],
            notified_ids=list(notified),
            identity=identity,
        )


__all__ = [
    "RefreshState",
    "RefreshStatus",
    "RefreshOutcome",
    "RefreshCoordinator",
    "PostingSource",
    "IdentityResolver",
]

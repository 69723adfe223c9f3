"""
Process-wide engine instance used by the API routes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.clients import AccountClient, JobDirectoryClient, build_client
from core.config import ACCOUNT_USER_ID, API_BASE_URL
from core.database import PostgresKeyValueStore
from core.proximity import JobCache, LocationTracker, RadiusConfig, RefreshCoordinator
from core.proximity.providers import ReportedLocationProvider
from core.proximity.radius import KeyValueStore
from core.proximity.sinks import DeliveryQueueSink


@dataclass
class ProximityEngine:
    store: KeyValueStore
    provider: ReportedLocationProvider
    tracker: LocationTracker
    radius_config: RadiusConfig
    directory: JobDirectoryClient
    accounts: AccountClient
    coordinator: RefreshCoordinator

    @property
    def cache(self) -> JobCache:
        return self.coordinator.cache

    async def aclose(self) -> None:
        await self.directory.aclose()
        await self.accounts.aclose()


def build_engine(store: Optional[KeyValueStore] = None, base_url: str = API_BASE_URL) -> ProximityEngine:
    store = store or PostgresKeyValueStore()
    provider = ReportedLocationProvider()
    tracker = LocationTracker(provider)
    radius_config = RadiusConfig(store)
    directory = JobDirectoryClient(build_client(base_url))
    accounts = AccountClient(build_client(base_url))
    coordinator = RefreshCoordinator(
        tracker=tracker,
        directory=directory,
        accounts=accounts,
        radius_config=radius_config,
        sink_factory=DeliveryQueueSink,
        owner_id=ACCOUNT_USER_ID,
    )
    return ProximityEngine(
        store=store,
        provider=provider,
        tracker=tracker,
        radius_config=radius_config,
        directory=directory,
        accounts=accounts,
        coordinator=coordinator,
    )


_engine: Optional[ProximityEngine] = None


def get_engine() -> ProximityEngine:
    """Return the engine, building it on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


async def shutdown_engine() -> None:
    global _engine
    if _engine is not None:
        await _engine.aclose()
        _engine = None

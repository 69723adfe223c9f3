"""
Run refresh cycles against the job directory and print what would be alerted.

Reads postings from API_BASE_URL but keeps everything else in memory: the radius
is given on the command line and notifications are printed instead of queued.

Usage:
  python -m scripts.simulate_refresh --lat 43.70 --lon -79.40 --radius 5 --token <bearer>
  python -m scripts.simulate_refresh --lat 43.70 --lon -79.40 --cycles 2   # second cycle should alert nothing
"""
from __future__ import annotations

import argparse
import asyncio
from typing import Dict, Optional

from core.clients import AccountClient, JobDirectoryClient, build_client
from core.config import API_BASE_URL
from core.proximity import Identity, LocationTracker, NotificationIntent, RadiusConfig, RefreshCoordinator
from core.proximity.providers import ReportedLocationProvider


class _DictStore:
    def __init__(self):
        self._values: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class _AnonymousAccounts:
    async def resolve_identity(self, token):
        return Identity(user_id="local", username="local", email="")


class _PrintSink:
    def __init__(self, identity: Identity):
        self.identity = identity

    def schedule(self, intent: NotificationIntent) -> None:
        print(f"[{intent.deliver_at:%H:%M:%S}] {intent.title}")
        print(f"  {intent.body}")


async def _run(args) -> None:
    provider = ReportedLocationProvider()
    provider.set_permission(True)
    provider.report(args.lat, args.lon)

    radius_config = RadiusConfig(_DictStore())
    radius_config.set_radius_km(args.radius)

    directory = JobDirectoryClient(build_client(args.base_url))
    accounts = AccountClient(build_client(args.base_url)) if args.token else _AnonymousAccounts()
    coordinator = RefreshCoordinator(
        tracker=LocationTracker(provider),
        directory=directory,
        accounts=accounts,
        radius_config=radius_config,
        sink_factory=_PrintSink,
    )

    try:
        for cycle in range(1, args.cycles + 1):
            outcome = await coordinator.trigger_refresh(args.token)
            print(f"Cycle {cycle}: {outcome.to_dict()}")
    finally:
        await directory.aclose()
        if isinstance(accounts, AccountClient):
            await accounts.aclose()


def main():
    parser = argparse.ArgumentParser(description="Simulate proximity refresh cycles.")
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lon", type=float, required=True)
    parser.add_argument("--radius", default="2", help="Alert radius in km")
    parser.add_argument("--cycles", type=int, default=1)
    parser.add_argument("--token", default=None, help="Bearer token for the account service")
    parser.add_argument("--base-url", default=API_BASE_URL)
    args = parser.parse_args()

    asyncio.run(_run(args))


if __name__ == "__main__":
    main()

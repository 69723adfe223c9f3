"""
Local snapshot of job postings with per-posting "already notified" markers.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from core.config import COORDINATE_TOLERANCE_DEG
from core.proximity.models import CacheEntry, JobPosting

log = logging.getLogger(__name__)


def _same_coordinates(a: JobPosting, b: JobPosting, tolerance: float) -> bool:
    if a.coordinates == b.coordinates:
        return True
    if not (a.has_coordinates and b.has_coordinates):
        return False
    return (
        abs(a.latitude - b.latitude) <= tolerance
        and abs(a.longitude - b.longitude) <= tolerance
    )


class JobCache:
    """
    Keyed by posting id. Entries are replaced wholesale on every successful fetch.

    `lock` is re-entrant so a caller can hold it across an
    unnotified_within() / mark_notified() sequence.
    """

    def __init__(self, coordinate_tolerance: float = COORDINATE_TOLERANCE_DEG):
        self.lock = threading.RLock()
        self._entries: Dict[str, CacheEntry] = {}
        self._coordinate_tolerance = coordinate_tolerance

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._entries

    def replace(self, postings: Iterable[JobPosting]) -> None:
        """
        Swap in a new posting set.

        The notified flag survives only for ids whose coordinates did not change;
        ids missing from the new set are dropped along with their history.
        """
        with self.lock:
            previous = self._entries
            fresh: Dict[str, CacheEntry] = {}
            carried = 0
            for posting in postings:
                old = previous.get(posting.id)
                notified = bool(
                    old
                    and old.notified
                    and _same_coordinates(old.posting, posting, self._coordinate_tolerance)
                )
                carried += notified
                fresh[posting.id] = CacheEntry(posting=posting, notified=notified)
            self._entries = fresh

        log.debug(
            "Job cache replaced",
            extra={"postings": len(fresh), "dropped": len(set(previous) - set(fresh)), "carried": carried},
        )

    def mark_notified(self, job_id: str) -> None:
        with self.lock:
            entry = self._entries.get(job_id)
            if entry is not None:
                entry.notified = True

    def unnotified_within(self, ids: Iterable[str]) -> List[JobPosting]:
        wanted = set(ids)
        with self.lock:
            return [
                entry.posting
                for job_id, entry in self._entries.items()
                if job_id in wanted and not entry.notified
            ]

    def postings(self) -> List[JobPosting]:
        with self.lock:
            return [entry.posting for entry in self._entries.values()]

    def get(self, job_id: str) -> Optional[JobPosting]:
        with self.lock:
            entry = self._entries.get(job_id)
            return entry.posting if entry else None

    def is_notified(self, job_id: str) -> bool:
        with self.lock:
            entry = self._entries.get(job_id)
            return bool(entry and entry.notified)


__all__ = ["JobCache"]

"""
Turns radius matches into scheduled notifications, at most once per posting.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Sequence

from core.config import NOTIFY_DELAY_SECONDS
from core.proximity.cache import JobCache
from core.proximity.errors import SinkUnavailable
from core.proximity.models import JobPosting, NotificationIntent
from core.proximity.notifications import NotificationSink

log = logging.getLogger(__name__)


def build_intent(posting: JobPosting, deliver_at: datetime) -> NotificationIntent:
    title = f"New job nearby: {posting.title or 'Untitled job'}"

    details = [posting.employer_name, posting.job_type, posting.address.city]
    summary = " - ".join(d for d in details if d)
    body = f"{summary} is within your alert radius." if summary else "A new job is within your alert radius."

    return NotificationIntent(
        title=title,
        body=body,
        payload={"jobId": posting.id},
        deliver_at=deliver_at,
    )


class AlertDispatcher:
    """
    The only component that calls the notification sink or sets notified flags.

    Delivery is at-least-once: a posting whose submission fails keeps
    notified=False and is offered again on the next cycle.
    """

    def __init__(self, delay_seconds: float = NOTIFY_DELAY_SECONDS, clock: Callable[[], datetime] = datetime.utcnow):
        self.delay = timedelta(seconds=delay_seconds)
        self._clock = clock

    def dispatch(self, matches: Sequence[JobPosting], cache: JobCache, sink: NotificationSink) -> List[str]:
        """Schedule alerts for matches not yet notified; returns the ids that were submitted."""
        submitted: List[str] = []
        with cache.lock:
            to_notify = cache.unnotified_within(p.id for p in matches)
            if not to_notify:
                return submitted

            deliver_at = self._clock() + self.delay
            for posting in to_notify:
                intent = build_intent(posting, deliver_at)
                try:
                    sink.schedule(intent)
                except SinkUnavailable as exc:
                    log.warning("Failed to schedule notification", extra={"job_id": posting.id, "error": str(exc)})
                    continue
                cache.mark_notified(posting.id)
                submitted.append(posting.id)

        log.info("Dispatched notifications", extra={"candidates": len(to_notify), "scheduled": len(submitted)})
        return submitted


__all__ = ["AlertDispatcher", "build_intent"]

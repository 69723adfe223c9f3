"""
Notification sink backed by the alert_deliveries queue.

The sink only records the intent; the worker surfaces it once deliver_at passes.
"""
from __future__ import annotations

import logging

import psycopg

from core.db.alerts import queue_alert_delivery
from core.proximity.errors import SinkUnavailable
from core.proximity.models import Identity, NotificationIntent

log = logging.getLogger(__name__)


class DeliveryQueueSink:
    def __init__(self, identity: Identity):
        self.identity = identity

    def schedule(self, intent: NotificationIntent) -> None:
        try:
            delivery_id = queue_alert_delivery(
                user_id=self.identity.user_id,
                email=self.identity.email or None,
                job_id=intent.job_id,
                title=intent.title,
                body=intent.body,
                deliver_at=intent.deliver_at,
            )
        except (psycopg.Error, RuntimeError) as exc:
            raise SinkUnavailable(f"Could not queue notification: {exc}") from exc

        log.debug(
            "Notification queued",
            extra={"delivery_id": delivery_id, "job_id": intent.job_id, "user_id": self.identity.user_id},
        )


__all__ = ["DeliveryQueueSink"]

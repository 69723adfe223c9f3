"""
Alert delivery queue and history.

The refresh cycle queues one row per notification; the worker surfaces due rows
and records whether delivery succeeded.
"""
from core.db.alerts.deliveries_store import (
    queue_alert_delivery,
    get_due_alert_deliveries,
    mark_alert_delivery_sent,
    mark_alert_delivery_failed,
    get_alert_deliveries_for_user,
    delete_alert_deliveries_for_user,
)

__all__ = [
    "queue_alert_delivery",
    "get_due_alert_deliveries",
    "mark_alert_delivery_sent",
    "mark_alert_delivery_failed",
    "get_alert_deliveries_for_user",
    "delete_alert_deliveries_for_user",
]

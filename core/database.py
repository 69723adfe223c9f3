"""
Storage API used by the app and worker (Postgres via DATABASE_URL).
"""
from core.db.alerts import (
    delete_alert_deliveries_for_user,
    get_alert_deliveries_for_user,
    get_due_alert_deliveries,
    mark_alert_delivery_failed,
    mark_alert_delivery_sent,
    queue_alert_delivery,
)
from core.db.prefs import PostgresKeyValueStore, delete_pref, get_pref, set_pref
from core.db.schema import init_db

__all__ = [
    "init_db",
    "get_pref",
    "set_pref",
    "delete_pref",
    "PostgresKeyValueStore",
    "queue_alert_delivery",
    "get_due_alert_deliveries",
    "mark_alert_delivery_sent",
    "mark_alert_delivery_failed",
    "get_alert_deliveries_for_user",
    "delete_alert_deliveries_for_user",
]

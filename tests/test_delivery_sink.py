from datetime import datetime

import psycopg
import pytest

import core.proximity.sinks as sinks
from core.proximity.errors import SinkUnavailable
from core.proximity.models import Identity, NotificationIntent

IDENTITY = Identity(user_id="u1", username="sam", email="sam@example.com")
INTENT = NotificationIntent(
    title="New job nearby: Barista",
    body="Cafe - Part-time is within your alert radius.",
    payload={"jobId": "j1"},
    deliver_at=datetime(2025, 1, 1, 12, 0, 2),
)


def test_schedule_queues_delivery_row(monkeypatch):
    queued = []
    monkeypatch.setattr(sinks, "queue_alert_delivery", lambda **kw: queued.append(kw) or 7)

    sinks.DeliveryQueueSink(IDENTITY).schedule(INTENT)

    assert queued == [
        {
            "user_id": "u1",
            "email": "sam@example.com",
            "job_id": "j1",
            "title": INTENT.title,
            "body": INTENT.body,
            "deliver_at": INTENT.deliver_at,
        }
    ]


@pytest.mark.parametrize("error", [psycopg.OperationalError("db down"), RuntimeError("DATABASE_URL must be set")])
def test_storage_errors_become_sink_unavailable(monkeypatch, error):
    def _fail(**kw):
        raise error

    monkeypatch.setattr(sinks, "queue_alert_delivery", _fail)

    with pytest.raises(SinkUnavailable) as excinfo:
        sinks.DeliveryQueueSink(IDENTITY).schedule(INTENT)
    assert excinfo.value.__cause__ is error


def test_missing_email_is_queued_as_null(monkeypatch):
    queued = []
    monkeypatch.setattr(sinks, "queue_alert_delivery", lambda **kw: queued.append(kw))

    sinks.DeliveryQueueSink(Identity(user_id="u2", username="", email="")).schedule(INTENT)

    assert queued[0]["email"] is None

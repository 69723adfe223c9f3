import asyncio
import logging
from datetime import datetime

from app.email_utils import deliver_alert_email
from core.config import CHECK_INTERVAL, DELIVERY_BATCH_SIZE, RUN_ONCE
from core.database import (
    get_due_alert_deliveries,
    init_db,
    mark_alert_delivery_failed,
    mark_alert_delivery_sent,
)
from core.proximity.notifications import get_notification_handler, register_notification_handler

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("worker")


async def run_once() -> int:
    """
    Do one delivery sweep:
    - load queued alerts whose deliver_at has passed
    - hand each one to the registered notification handler
    - record sent / failed
    Returns number of alerts delivered.
    """
    due = get_due_alert_deliveries(now=datetime.utcnow(), limit=DELIVERY_BATCH_SIZE)
    if not due:
        log.info("No alerts due this cycle.")
        return 0

    handler = get_notification_handler()
    sent_count = 0
    for delivery in due:
        delivery_id = int(delivery["id"])
        try:
            handler(delivery)
        except Exception as e:
            log.error("Failed to deliver alert", extra={"delivery_id": delivery_id, "error": str(e)})
            mark_alert_delivery_failed(delivery_id, str(e))
            continue
        mark_alert_delivery_sent(delivery_id)
        sent_count += 1

    log.info("Cycle complete", extra={"due": len(due), "sent": sent_count})
    return sent_count


async def main():
    init_db()
    register_notification_handler(deliver_alert_email)

    while True:
        try:
            await run_once()
        except Exception as e:
            log.exception("Error during run", extra={"error": str(e)})

        if RUN_ONCE:
            break

        log.info("Sleeping", extra={"seconds": CHECK_INTERVAL})
        await asyncio.sleep(CHECK_INTERVAL)


if __name__ == "__main__":
    asyncio.run(main())

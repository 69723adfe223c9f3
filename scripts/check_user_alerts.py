"""
Quick helper to list alert deliveries for a given user id.

Usage:
  python -m scripts.check_user_alerts <user_id>
"""
import sys

from core.database import get_alert_deliveries_for_user


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.check_user_alerts <user_id>")
        sys.exit(1)

    user_id = sys.argv[1]
    deliveries = get_alert_deliveries_for_user(user_id=user_id)
    if not deliveries:
        print(f"No alerts found for {user_id}")
        return

    print(f"Found {len(deliveries)} alert(s) for {user_id}:")
    for d in deliveries:
        print(
            f"  id={d.get('delivery_id')} "
            f"job={d.get('job_id')} "
            f"status={d.get('status')} "
            f"deliver_at={d.get('deliver_at')}"
            + (f" error={d['error']}" if d.get("error") else "")
        )


if __name__ == "__main__":
    main()

"""
Environment configuration shared by the API and the worker.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

# Load `.env` for local/dev runs (override=True so updates take effect after restart).
load_dotenv(override=True)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


def _int_env(name: str, default: int) -> int:
    return int(_float_env(name, default))


# -------- REMOTE SERVICES --------
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000").rstrip("/")
HTTP_CONNECT_TIMEOUT = _float_env("HTTP_CONNECT_TIMEOUT", 5.0)
HTTP_READ_TIMEOUT = _float_env("HTTP_READ_TIMEOUT", 10.0)

# -------- REFRESH CYCLE --------
REFRESH_TIMEOUT_SECONDS = _float_env("REFRESH_TIMEOUT_SECONDS", 15.0)
NOTIFY_DELAY_SECONDS = _float_env("NOTIFY_DELAY_SECONDS", 2.0)
DEFAULT_RADIUS_KM = _float_env("DEFAULT_RADIUS_KM", 2.0)
LOCATION_MAX_AGE_SECONDS = _float_env("LOCATION_MAX_AGE_SECONDS", 300.0)
# 0.0 means exact coordinate equality when carrying alert history across refreshes.
COORDINATE_TOLERANCE_DEG = _float_env("COORDINATE_TOLERANCE_DEG", 0.0)
# Account this engine alerts for; unset binds to the first account that refreshes.
ACCOUNT_USER_ID = os.getenv("ACCOUNT_USER_ID") or None

# -------- DATABASE --------
DB_CONNECT_TIMEOUT = _int_env("DB_CONNECT_TIMEOUT", 5)  # seconds

# -------- WORKER --------
CHECK_INTERVAL = _int_env("CHECK_INTERVAL", 10)  # seconds between delivery sweeps
DELIVERY_BATCH_SIZE = _int_env("DELIVERY_BATCH_SIZE", 100)
RUN_ONCE = os.getenv("RUN_ONCE", "false").lower() == "true"

# -------- EMAIL --------
EMAIL_USER = os.getenv("EMAIL_USER")
EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
EMAIL_FROM = os.getenv("EMAIL_FROM")
SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.gmail.com")
SMTP_PORT = _int_env("SMTP_PORT", 587)


__all__ = [
    "API_BASE_URL",
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_READ_TIMEOUT",
    "REFRESH_TIMEOUT_SECONDS",
    "NOTIFY_DELAY_SECONDS",
    "DEFAULT_RADIUS_KM",
    "LOCATION_MAX_AGE_SECONDS",
    "COORDINATE_TOLERANCE_DEG",
    "ACCOUNT_USER_ID",
    "DB_CONNECT_TIMEOUT",
    "CHECK_INTERVAL",
    "DELIVERY_BATCH_SIZE",
    "RUN_ONCE",
    "EMAIL_USER",
    "EMAIL_PASSWORD",
    "EMAIL_FROM",
    "SMTP_SERVER",
    "SMTP_PORT",
]

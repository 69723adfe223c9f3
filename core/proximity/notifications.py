"""
Notification plumbing: the sink interface, the process-wide display handler
and the push-channel token.

One handler is installed at startup and lives until the process exits.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Protocol

from core.proximity.models import NotificationIntent
from core.proximity.radius import KeyValueStore

log = logging.getLogger(__name__)

PUSH_TOKEN_KEY = "push_token"

NotificationHandler = Callable[[Dict[str, Any]], None]


class NotificationSink(Protocol):
    def schedule(self, intent: NotificationIntent) -> None:
        """Queue intent for delivery at intent.deliver_at; raises SinkUnavailable on failure."""
        ...


_handler_lock = threading.Lock()
_handler: Optional[NotificationHandler] = None


def register_notification_handler(handler: NotificationHandler) -> bool:
    """
    Install the process-wide handler that surfaces due notifications.

    Returns True when installed. Registering the same handler again is a no-op;
    a different handler is refused once one is installed.
    """
    global _handler
    with _handler_lock:
        if _handler is None:
            _handler = handler
            log.info("Notification handler registered", extra={"handler": getattr(handler, "__name__", repr(handler))})
            return True
        if _handler is not handler:
            log.warning(
                "Notification handler already registered; ignoring replacement",
                extra={"handler": getattr(handler, "__name__", repr(handler))},
            )
        return False


def get_notification_handler() -> NotificationHandler:
    with _handler_lock:
        if _handler is None:
            raise RuntimeError("No notification handler registered. Call register_notification_handler() at startup.")
        return _handler


def reset_notification_handler() -> None:
    """Forget the installed handler (tests only)."""
    global _handler
    with _handler_lock:
        _handler = None


def save_push_token(store: KeyValueStore, token: str) -> str:
    token = (token or "").strip()
    if not token:
        raise ValueError("Push token must not be empty")
    store.set(PUSH_TOKEN_KEY, token)
    return token


def get_push_token(store: KeyValueStore) -> Optional[str]:
    return store.get(PUSH_TOKEN_KEY)


__all__ = [
    "PUSH_TOKEN_KEY",
    "NotificationHandler",
    "NotificationSink",
    "register_notification_handler",
    "get_notification_handler",
    "reset_notification_handler",
    "save_push_token",
    "get_push_token",
]

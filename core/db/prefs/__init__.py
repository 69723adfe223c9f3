"""
Preference storage re-exports.
"""
from core.db.prefs.prefs_store import (
    PostgresKeyValueStore,
    delete_pref,
    get_pref,
    set_pref,
)

__all__ = [
    "get_pref",
    "set_pref",
    "delete_pref",
    "PostgresKeyValueStore",
]

"""
Activity sink adapters.

Usage:
    from assemblyman.adapters import get_activity_sink

    get_activity_sink().append(ActivityEntry(user_id=7, action='CREATE_ASSEMBLY'))

Settings:
    ASSEMBLYMAN = {
        "ACTIVITY_SINK": "assemblyman.adapters.activity.DatabaseActivitySink",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from assemblyman.conf import assemblyman_settings
from assemblyman.protocols.activity import ActivityEntry, ActivitySink

logger = logging.getLogger(__name__)


class DatabaseActivitySink:
    """Writes ActivityLog rows (joins the caller's transaction)."""

    def append(self, entry: ActivityEntry) -> None:
        from assemblyman.models.activity import ActivityLog

        ActivityLog.objects.create(
            user_id=entry.user_id,
            action=entry.action,
            details=entry.details,
        )


class NoopActivitySink:
    """Discards entries. For deployments that log activity elsewhere."""

    def append(self, entry: ActivityEntry) -> None:
        logger.debug("activity.discarded", extra={"action": entry.action})


# Cached sink instance
_lock = threading.Lock()
_activity_sink: ActivitySink | None = None


def get_activity_sink() -> ActivitySink:
    """
    Return the configured activity sink.

    Raises:
        ImproperlyConfigured: If ACTIVITY_SINK cannot be imported
    """
    global _activity_sink

    if _activity_sink is None:
        with _lock:
            if _activity_sink is None:  # double-checked
                sink_path = assemblyman_settings.ACTIVITY_SINK
                try:
                    sink_class = import_string(sink_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import activity sink '{sink_path}': {e}"
                    ) from e
                _activity_sink = sink_class()
                logger.debug("Loaded activity sink: %s", sink_path)

    return _activity_sink


def reset_activity_sink() -> None:
    """Reset the cached sink. Useful for testing."""
    global _activity_sink
    _activity_sink = None

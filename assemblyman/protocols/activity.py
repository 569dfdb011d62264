"""
Activity Sink Protocol — where user actions are recorded.

Assemblyman appends one entry per assembly created or deleted.
The default sink writes ActivityLog rows in the caller's transaction,
so an entry exists if and only if the action committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ActivityEntry:
    """One append-only activity record."""

    user_id: int | None
    action: str
    details: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ActivitySink(Protocol):
    """
    Append-only sink for activity entries.

    Implementations:
        - DatabaseActivitySink: ActivityLog rows (default)
        - NoopActivitySink: discards entries
    """

    def append(self, entry: ActivityEntry) -> None:
        """
        Record an entry.

        Args:
            entry: What happened and who did it
        """
        ...

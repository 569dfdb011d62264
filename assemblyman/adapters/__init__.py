"""
Assemblyman Adapters.

Implementations of protocols for external systems.
"""

from assemblyman.adapters.activity import (
    DatabaseActivitySink,
    NoopActivitySink,
    get_activity_sink,
    reset_activity_sink,
)

__all__ = [
    "DatabaseActivitySink",
    "NoopActivitySink",
    "get_activity_sink",
    "reset_activity_sink",
]

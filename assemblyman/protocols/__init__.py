"""
Assemblyman Protocols.

Request types for the workshop service and interfaces for external sinks.
"""

from assemblyman.protocols.activity import ActivityEntry, ActivitySink
from assemblyman.protocols.assembly import (
    AssemblyRequest,
    ComponentSource,
    ReverseRequest,
    UnitSerials,
)

__all__ = [
    "ActivityEntry",
    "ActivitySink",
    "AssemblyRequest",
    "ComponentSource",
    "ReverseRequest",
    "UnitSerials",
]

"""
Assemblyman configuration.

Usage in settings.py:
    ASSEMBLYMAN = {
        "API_KEYS": ["public-anon-key"],
        "BEARER_TOKENS": ["service-token"],
        "INTERNAL_SOURCE_CODE": "internal",
        "INTERNAL_SOURCE_NAME": "Internal",
        "ACTIVITY_SINK": "assemblyman.adapters.activity.DatabaseActivitySink",
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


@dataclass
class AssemblymanSettings:
    """Assemblyman configuration settings."""

    # Accepted values for the Apikey header
    API_KEYS: list[str] = field(default_factory=list)

    # Accepted values for "Authorization: Bearer <token>"
    BEARER_TOKENS: list[str] = field(default_factory=list)

    # Vendor id used by clients for the unattributed (in-house) source
    INTERNAL_SOURCE_CODE: str = "internal"

    # Display name of the unattributed source
    INTERNAL_SOURCE_NAME: str = "Internal"

    # Where create/delete entries are appended (dotted path)
    ACTIVITY_SINK: str = "assemblyman.adapters.activity.DatabaseActivitySink"


def get_assemblyman_settings() -> AssemblymanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "ASSEMBLYMAN", {})
    return AssemblymanSettings(**{
        k: v for k, v in user_settings.items()
        if k in AssemblymanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_assemblyman_settings(), name)


assemblyman_settings = _LazySettings()

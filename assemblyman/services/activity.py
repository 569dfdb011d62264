"""
Activity log — append who did what.

Usage:
    from assemblyman.services.activity import log_activity

    log_activity(user, ActivityAction.CREATE_ASSEMBLY, {'assemblyName': 'Run 7'})
"""

import logging

from assemblyman.adapters.activity import get_activity_sink
from assemblyman.protocols.activity import ActivityEntry

logger = logging.getLogger('assemblyman')


def log_activity(user, action: str, details: dict | None = None) -> ActivityEntry:
    """
    Append an activity entry through the configured sink.

    Args:
        user: Acting user (or None)
        action: ActivityAction value
        details: JSON context; Decimals and datetimes are stored as strings
    """
    entry = ActivityEntry(
        user_id=user.pk if user is not None else None,
        action=str(action),
        details=details or {},
    )
    get_activity_sink().append(entry)
    logger.info(
        "activity.logged",
        extra={"action": entry.action, "user_id": entry.user_id},
    )
    return entry

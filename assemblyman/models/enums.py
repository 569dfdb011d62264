"""
Enums for Assemblyman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ActivityAction(models.TextChoices):
    """Actions recorded in the activity log."""
    CREATE_ASSEMBLY = 'CREATE_ASSEMBLY', _('Assembly created')
    DELETE_ASSEMBLY = 'DELETE_ASSEMBLY', _('Assembly deleted')
    UPDATE_SERIALS = 'UPDATE_SERIALS', _('Unit serials updated')

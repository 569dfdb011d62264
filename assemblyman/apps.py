"""Django app configuration for Assemblyman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AssemblymanConfig(AppConfig):
    """Configuration for Assemblyman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "assemblyman"
    verbose_name = _("Manufacturing & Assembly")

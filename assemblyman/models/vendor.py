"""
Vendor model — Where purchased stock comes from.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Vendor(models.Model):
    """
    Supplier of component stock.

    The code is the vendor identifier clients send when choosing a
    source for a BOM component. Stock without a vendor belongs to the
    internal source.
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Code'),
        help_text=_('Unique identifier (e.g. acme, globex)'),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_('Name'),
    )
    legal_name = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Legal name'),
    )
    email = models.EmailField(blank=True, default='', verbose_name=_('Email'))
    phone = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Phone'))
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Vendor')
        verbose_name_plural = _('Vendors')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

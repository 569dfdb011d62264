"""
Item model — Inventory item (component or finished good).
"""

from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _


class Item(models.Model):
    """
    Inventory item.

    Current stock is not stored here: it is the sum of the item's lots,
    each of which is kept by the Move ledger and never goes negative.
    """

    code = models.CharField(
        unique=True,
        max_length=50,
        verbose_name=_('Item ID'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    display_name = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Display name'),
    )
    unit = models.CharField(max_length=20, default='pcs', verbose_name=_('Unit'))
    group = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Group'))
    item_class = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Class'))

    stock_min = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Minimum stock'),
    )
    stock_max = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Maximum stock'),
    )
    stock_reorder = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Reorder level'),
        help_text=_('0 = no reorder alert'),
    )
    is_serial_tracked = models.BooleanField(
        default=False,
        verbose_name=_('Serial tracked'),
        help_text=_('Units fitted with this item record one serial per piece.'),
    )

    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Items')
        ordering = ['name']

    @property
    def stock_current(self) -> Decimal:
        """Sum of all lot quantities for this item."""
        return self.lots.aggregate(
            t=Coalesce(Sum('_quantity'), Decimal('0'))
        )['t']

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def __str__(self) -> str:
        return f"{self.code} · {self.name}"

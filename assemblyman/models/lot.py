"""
Lot model — Quantity of an item attributable to one vendor source.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _


class LotQuerySet(models.QuerySet):
    """Custom QuerySet for Lot with chainable filters."""

    def for_item(self, item):
        """Filter lots for a specific item."""
        return self.filter(item=item)

    def from_vendor(self, vendor):
        """Filter by vendor source (None = internal source)."""
        if vendor is None:
            return self.filter(vendor__isnull=True)
        return self.filter(vendor=vendor)

    def in_stock(self):
        """Only lots with positive quantity."""
        return self.filter(_quantity__gt=0)


class Lot(models.Model):
    """
    Quantity of an item from one vendor source and purchase batch.

    Coordinates:
    - vendor: WHO supplied it — null means internal/unattributed
    - batch: WHICH purchase — '' when not tracked

    Performance:
    - _quantity is cache updated atomically by Move
    - Read is O(1), not O(N)
    - Use recalculate() for audit/correction
    """

    item = models.ForeignKey(
        'assemblyman.Item',
        on_delete=models.PROTECT,
        related_name='lots',
        verbose_name=_('Item'),
    )
    vendor = models.ForeignKey(
        'assemblyman.Vendor',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='lots',
        verbose_name=_('Vendor'),
        help_text=_('Empty = internal source'),
    )
    batch = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Source purchase'),
    )

    # Quantity cache (updated atomically by Move)
    _quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantity'),
    )

    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LotQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lot')
        verbose_name_plural = _('Lots')
        constraints = [
            models.UniqueConstraint(
                fields=['item', 'vendor', 'batch'],
                name='unique_lot_coordinate',
            ),
            models.CheckConstraint(
                condition=models.Q(_quantity__gte=0),
                name='lot_quantity_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'vendor'], name='asm_lot_item_vendor_idx'),
        ]

    @property
    def quantity(self) -> Decimal:
        """Total quantity — O(1) cache read."""
        return self._quantity

    @property
    def is_internal(self) -> bool:
        return self.vendor_id is None

    def recalculate(self) -> Decimal:
        """
        Recalculate quantity from Moves.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            New calculated quantity
        """
        import logging

        total = self.moves.aggregate(
            t=Coalesce(Sum('delta'), Decimal('0'))
        )['t']

        if total != self._quantity:
            old = self._quantity
            self._quantity = total
            self.save(update_fields=['_quantity', 'updated_at'])

            logger = logging.getLogger('assemblyman')
            logger.warning(
                f"Lot {self.pk} recalculated: {old} → {total} "
                f"(diff: {total - old})"
            )

        return total

    def __str__(self) -> str:
        source = self.vendor.code if self.vendor_id else 'internal'
        batch = f"#{self.batch}" if self.batch else ""
        return f"{self.item.code} [{source}{batch}]: {self._quantity}"

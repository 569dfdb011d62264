"""
Move model — Immutable ledger of quantity changes.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Move(models.Model):
    """
    Immutable record of quantity change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new Moves with inverse delta
    - Updates Lot._quantity atomically on save()
    - A negative delta only applies if the lot still holds enough;
      otherwise nothing is written and AssemblyError is raised

    This is the ONLY model that changes quantity.
    """

    lot = models.ForeignKey(
        'assemblyman.Lot',
        on_delete=models.PROTECT,
        related_name='moves',
        verbose_name=_('Lot'),
    )

    delta = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Delta'),
        help_text=_('Positive = in, Negative = out'),
    )

    # External reference (assembly, sale, purchase, etc)
    reference_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Reference type'),
    )
    reference_id = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Reference ID'))
    reference = GenericForeignKey('reference_type', 'reference_id')

    reason = models.CharField(
        max_length=255,
        verbose_name=_('Reason'),
        help_text=_('Required. E.g. "Assembly #12", "Purchase PO-881"'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name=_('User'),
    )

    class Meta:
        verbose_name = _('Move')
        verbose_name_plural = _('Moves')
        ordering = ['timestamp']
        indexes = [
            models.Index(fields=['lot', 'timestamp'], name='asm_move_lot_timestamp_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='asm_move_reference_idx'),
        ]

    def save(self, *args, **kwargs):
        """Save move and update lot cache atomically."""
        # Immutability check
        if self.pk:
            raise ValueError(
                "Moves are immutable. "
                "To correct, create a new Move with inverse delta."
            )

        if not self.reason:
            raise ValueError("Reason is required")

        with transaction.atomic():
            from assemblyman.models.lot import Lot

            lots = Lot.objects.filter(pk=self.lot_id)
            if self.delta < 0:
                # Conditional decrement: never below zero
                lots = lots.filter(_quantity__gte=-self.delta)

            updated = lots.update(
                _quantity=F('_quantity') + self.delta,
                updated_at=timezone.now()
            )
            if not updated:
                from assemblyman.exceptions import AssemblyError

                current = Lot.objects.filter(pk=self.lot_id).values_list(
                    '_quantity', flat=True
                ).first()
                raise AssemblyError(
                    'INSUFFICIENT_QUANTITY',
                    lot_id=self.lot_id,
                    available=current,
                    requested=-self.delta,
                )

            super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — moves are immutable."""
        raise ValueError(
            "Moves are immutable. "
            "To reverse, create a new Move with inverse delta."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.reason}"

"""
Assembly models — Manufacturing runs and their traceability records.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Assembly(models.Model):
    """
    One manufacturing run producing ``quantity`` units from a BOM.

    Created and deleted only through the workshop service:
    creating consumes component lots and stocks the assembled item,
    deleting reverses exactly that delta. There is no edit.

    ``item`` is the assembled item as it was when the run was created;
    the BOM may be edited afterwards.
    """

    bom = models.ForeignKey(
        'assemblyman.BOM',
        on_delete=models.PROTECT,
        related_name='assemblies',
        verbose_name=_('Bill of materials'),
    )
    item = models.ForeignKey(
        'assemblyman.Item',
        on_delete=models.PROTECT,
        related_name='assemblies',
        verbose_name=_('Assembled item'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    quantity = models.PositiveIntegerField(verbose_name=_('Units'))
    po_number = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Purchase order'),
        help_text=_('Optional purchase order this run fulfills'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Created by'),
    )

    class Meta:
        verbose_name = _('Assembly')
        verbose_name_plural = _('Assemblies')
        ordering = ['-created_at']

    def consumed(self) -> list[tuple]:
        """
        Components this run actually drew, in BOM order.

        Returns:
            List of (component, total quantity, quantity per unit)
        """
        totals = {}
        for usage in self.usages.select_related('component').order_by('pk'):
            component, total = totals.get(usage.component_id, (usage.component, Decimal('0')))
            totals[usage.component_id] = (component, total + usage.quantity)
        return [
            (component, total, total / self.quantity)
            for component, total in totals.values()
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.quantity}x {self.bom})"


class AssemblyUnit(models.Model):
    """One produced unit of an assembly run (1..N)."""

    assembly = models.ForeignKey(
        Assembly,
        on_delete=models.CASCADE,
        related_name='units',
        verbose_name=_('Assembly'),
    )
    unit_number = models.PositiveIntegerField(verbose_name=_('Unit number'))
    serial_number = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Serial number'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Assembly unit')
        verbose_name_plural = _('Assembly units')
        ordering = ['assembly', 'unit_number']
        constraints = [
            models.UniqueConstraint(
                fields=['assembly', 'unit_number'],
                name='unique_assembly_unit_number',
            ),
        ]

    def __str__(self) -> str:
        serial = f" SN {self.serial_number}" if self.serial_number else ""
        return f"{self.assembly.name} #{self.unit_number}{serial}"


class ComponentUsage(models.Model):
    """
    Traceability record: which lot supplied how much of a component.

    The lot is PROTECTed so reversal can always restore to it.
    """

    assembly = models.ForeignKey(
        Assembly,
        on_delete=models.CASCADE,
        related_name='usages',
        verbose_name=_('Assembly'),
    )
    component = models.ForeignKey(
        'assemblyman.Item',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Component'),
    )
    lot = models.ForeignKey(
        'assemblyman.Lot',
        on_delete=models.PROTECT,
        related_name='usages',
        verbose_name=_('Source lot'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity used'),
    )

    class Meta:
        verbose_name = _('Component usage')
        verbose_name_plural = _('Component usages')
        ordering = ['assembly', 'pk']

    def __str__(self) -> str:
        return f"{self.quantity}x {self.component.code} ← {self.lot}"


class UnitComponentSerial(models.Model):
    """Serial number of one serial-tracked component fitted into a unit."""

    unit = models.ForeignKey(
        AssemblyUnit,
        on_delete=models.CASCADE,
        related_name='component_serials',
        verbose_name=_('Unit'),
    )
    component = models.ForeignKey(
        'assemblyman.Item',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Component'),
    )
    serial_number = models.CharField(max_length=100, verbose_name=_('Serial number'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Component serial')
        verbose_name_plural = _('Component serials')
        ordering = ['unit', 'component', 'pk']

    def __str__(self) -> str:
        return f"{self.component.code} SN {self.serial_number}"

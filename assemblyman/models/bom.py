"""
BOM models — Bill of materials for an assembled item.
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class BOM(models.Model):
    """
    Recipe for one assembled item: which components, how many per unit.

    Examples:
        bom = BOM.objects.create(name='Widget v2', item=widget)
        bom.lines.create(component=part_a, quantity=2)
        bom.lines.create(component=part_b, quantity=1)
    """

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    item = models.ForeignKey(
        'assemblyman.Item',
        on_delete=models.PROTECT,
        related_name='boms',
        verbose_name=_('Assembled item'),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Created by'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Bill of materials')
        verbose_name_plural = _('Bills of materials')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class BOMLine(models.Model):
    """One component of a BOM with its quantity per assembled unit."""

    bom = models.ForeignKey(
        BOM,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Bill of materials'),
    )
    component = models.ForeignKey(
        'assemblyman.Item',
        on_delete=models.PROTECT,
        related_name='used_in',
        verbose_name=_('Component'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))],
        verbose_name=_('Quantity per unit'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('BOM line')
        verbose_name_plural = _('BOM lines')
        ordering = ['pk']
        constraints = [
            models.UniqueConstraint(
                fields=['bom', 'component'],
                name='unique_bom_component',
            ),
        ]

    def clean(self):
        if self.bom_id and self.component_id and self.component_id == self.bom.item_id:
            raise ValidationError({
                'component': _('A BOM cannot use its own assembled item as a component.'),
            })

    def required_for(self, units: int) -> Decimal:
        """Total quantity needed to assemble ``units`` units."""
        return self.quantity * units

    def __str__(self) -> str:
        return f"{self.quantity}x {self.component.code}"

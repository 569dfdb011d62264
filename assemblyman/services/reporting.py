"""
Assembly reporting — pick lists and traceability views.

Read-only. Nothing here writes to the database, so a failure here never
affects a run that was already created.

Usage:
    html = workshop.render_picklist(assembly)
    csv_text = workshop.usage_csv(workshop.usage_rows(assembly))
"""

import csv
import io
from dataclasses import dataclass, field
from decimal import Decimal

from django.template.loader import render_to_string
from django.utils import timezone

from assemblyman.conf import assemblyman_settings
from assemblyman.exceptions import AssemblyError
from assemblyman.models.assembly import ComponentUsage


@dataclass(frozen=True)
class PicklistLine:
    code: str
    name: str
    unit: str
    quantity_per_unit: Decimal
    total_quantity: Decimal


@dataclass(frozen=True)
class PicklistPage:
    """Components to pick for one unit of a run."""

    unit_number: int
    unit_count: int
    lines: tuple[PicklistLine, ...]


@dataclass(frozen=True)
class UsageRow:
    """One flattened traceability record."""

    assembly_id: int
    assembly_name: str
    component_code: str
    component_name: str
    quantity: Decimal
    vendor: str
    vendor_name: str
    source_purchase: str

    def as_dict(self) -> dict:
        return {
            'assemblyId': self.assembly_id,
            'assemblyName': self.assembly_name,
            'componentId': self.component_code,
            'componentName': self.component_name,
            'quantity': str(self.quantity),
            'vendorId': self.vendor,
            'vendorName': self.vendor_name,
            'sourcePurchase': self.source_purchase,
        }


@dataclass(frozen=True)
class UnitTrace:
    """Serials recorded on one produced unit."""

    unit_id: int
    unit_number: int
    serial_number: str
    # Item.code -> serials
    components: dict[str, list[str]] = field(default_factory=dict)


USAGE_CSV_HEADER = [
    'assembly_id',
    'assembly_name',
    'component_id',
    'component_name',
    'quantity',
    'vendor_id',
    'vendor_name',
    'source_purchase',
]


class AssemblyReports:
    """Pick list and traceability methods."""

    @classmethod
    def picklist(cls, assembly) -> list[PicklistPage]:
        """
        One page per produced unit, each listing every component the run drew.

        Built from the run's usage records, so later BOM edits do not
        change it.

        Raises:
            AssemblyError('BOM_EMPTY'): If the run drew no components
        """
        lines = tuple(
            PicklistLine(
                code=component.code,
                name=component.label,
                unit=component.unit,
                quantity_per_unit=per_unit,
                total_quantity=total,
            )
            for component, total, per_unit in assembly.consumed()
        )
        if not lines:
            raise AssemblyError('BOM_EMPTY', bom_id=assembly.bom_id)

        return [
            PicklistPage(unit_number=n, unit_count=assembly.quantity, lines=lines)
            for n in range(1, assembly.quantity + 1)
        ]

    @classmethod
    def render_picklist(cls, assembly) -> str:
        """Printable HTML pick list, one page break per unit."""
        return render_to_string('assemblyman/picklist.html', {
            'assembly': assembly,
            'bom': assembly.bom,
            'item': assembly.item,
            'pages': cls.picklist(assembly),
            'printed_at': timezone.now(),
        })

    @classmethod
    def usage_rows(cls, assembly=None) -> list[UsageRow]:
        """Traceability records, for one run or all runs."""
        qs = ComponentUsage.objects.select_related(
            'assembly', 'component', 'lot__vendor'
        ).order_by('assembly__created_at', 'assembly_id', 'pk')
        if assembly is not None:
            qs = qs.filter(assembly=assembly)

        rows = []
        for usage in qs:
            vendor = usage.lot.vendor
            rows.append(UsageRow(
                assembly_id=usage.assembly_id,
                assembly_name=usage.assembly.name,
                component_code=usage.component.code,
                component_name=usage.component.label,
                quantity=usage.quantity,
                vendor=vendor.code if vendor else assemblyman_settings.INTERNAL_SOURCE_CODE,
                vendor_name=vendor.name if vendor else assemblyman_settings.INTERNAL_SOURCE_NAME,
                source_purchase=usage.lot.batch,
            ))
        return rows

    @classmethod
    def usage_csv(cls, rows) -> str:
        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow(USAGE_CSV_HEADER)
        for row in rows:
            writer.writerow([
                row.assembly_id,
                row.assembly_name,
                row.component_code,
                row.component_name,
                row.quantity,
                row.vendor,
                row.vendor_name,
                row.source_purchase,
            ])
        return out.getvalue()

    @classmethod
    def unit_trace(cls, assembly) -> list[UnitTrace]:
        """Product serial and fitted component serials per unit."""
        traces = []
        for unit in assembly.units.prefetch_related('component_serials__component'):
            components = {}
            for serial in unit.component_serials.all():
                components.setdefault(serial.component.code, []).append(serial.serial_number)
            traces.append(UnitTrace(
                unit_id=unit.pk,
                unit_number=unit.unit_number,
                serial_number=unit.serial_number,
                components=components,
            ))
        return traces

"""
Vendor availability — which sources can supply a BOM run.

Read-only. The orchestrator re-checks everything under lock at write
time; this module only tells the client what to offer.

Usage:
    sourcing = workshop.resolve(bom, 3)
    if not sourcing.is_satisfiable:
        for line in sourcing.shortages:
            print(f"{line.component.code}: needs {line.required}")
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from django.db.models import Sum

from assemblyman.conf import assemblyman_settings
from assemblyman.exceptions import AssemblyError
from assemblyman.models.lot import Lot


def parse_quantity(value) -> Decimal:
    """
    Coerce a quantity that may arrive as a numeric-looking string.

    Raises:
        AssemblyError('INVALID_QUANTITY'): If value is not numeric
    """
    if isinstance(value, bool):
        raise AssemblyError('INVALID_QUANTITY', requested=value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise AssemblyError('INVALID_QUANTITY', requested=value) from None
    else:
        raise AssemblyError('INVALID_QUANTITY', requested=value)

    if not result.is_finite():
        raise AssemblyError('INVALID_QUANTITY', requested=value)
    return result


@dataclass(frozen=True)
class VendorStock:
    """Stock of one item held by one vendor source."""

    vendor_id: str | None  # Vendor.code, None = internal source
    vendor_name: str
    available: Decimal

    @property
    def source_code(self) -> str:
        return self.vendor_id or assemblyman_settings.INTERNAL_SOURCE_CODE

    def as_dict(self) -> dict:
        return {
            'vendorId': self.vendor_id,
            'vendorName': self.vendor_name,
            'sourceCode': self.source_code,
            'stockAvailable': str(self.available),
        }


@dataclass(frozen=True)
class SourcingLine:
    """Resolver result for one BOM line."""

    line_id: int
    component: object  # Item
    quantity_per_unit: Decimal
    required: Decimal
    vendors: tuple[VendorStock, ...]

    @property
    def is_satisfiable(self) -> bool:
        return len(self.vendors) > 0


@dataclass(frozen=True)
class Sourcing:
    """Resolver result for a whole BOM run."""

    bom: object  # BOM
    quantity: int
    lines: tuple[SourcingLine, ...] = field(default_factory=tuple)

    @property
    def shortages(self) -> list[SourcingLine]:
        return [line for line in self.lines if not line.is_satisfiable]

    @property
    def is_satisfiable(self) -> bool:
        return bool(self.lines) and not self.shortages


class VendorResolver:
    """Vendor availability methods."""

    @classmethod
    def vendor_stock(cls, item) -> list[VendorStock]:
        """
        Available quantity per vendor source for an item.

        Vendors are ordered by name; the internal source comes last.
        Sources with nothing in stock are omitted.
        """
        rows = (
            Lot.objects.for_item(item)
            .in_stock()
            .values('vendor__code', 'vendor__name')
            .annotate(total=Sum('_quantity'))
            .order_by('vendor__name')
        )

        vendors = []
        internal = None
        for row in rows:
            if row['vendor__code'] is None:
                internal = VendorStock(
                    vendor_id=None,
                    vendor_name=assemblyman_settings.INTERNAL_SOURCE_NAME,
                    available=row['total'],
                )
            else:
                vendors.append(VendorStock(
                    vendor_id=row['vendor__code'],
                    vendor_name=row['vendor__name'],
                    available=row['total'],
                ))
        if internal is not None:
            vendors.append(internal)
        return vendors

    @classmethod
    def qualifying_vendors(cls, stocks, required) -> list[VendorStock]:
        """
        Keep the sources that can cover ``required`` on their own.

        ``available`` may be a numeric-looking string; it is parsed before
        comparing. The boundary is inclusive (6 available covers 6 required).
        """
        required = parse_quantity(required)
        return [
            stock for stock in stocks
            if parse_quantity(stock.available) >= required
        ]

    @classmethod
    def resolve(cls, bom, quantity) -> Sourcing:
        """
        Qualifying vendor sources for every line of a BOM run.

        Call again whenever the quantity changes.

        Raises:
            AssemblyError('INVALID_QUANTITY'): If quantity is not a positive integer
        """
        quantity = parse_quantity(quantity)
        if quantity <= 0 or quantity != quantity.to_integral_value():
            raise AssemblyError('INVALID_QUANTITY', requested=quantity)
        units = int(quantity)

        lines = []
        for line in bom.lines.select_related('component'):
            required = line.required_for(units)
            lines.append(SourcingLine(
                line_id=line.pk,
                component=line.component,
                quantity_per_unit=line.quantity,
                required=required,
                vendors=tuple(cls.qualifying_vendors(
                    cls.vendor_stock(line.component), required
                )),
            ))
        return Sourcing(bom=bom, quantity=units, lines=tuple(lines))

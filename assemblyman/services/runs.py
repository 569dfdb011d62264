"""
Assembly runs — create and reverse manufacturing runs.

A run consumes component stock from the chosen vendor sources and stocks
the assembled item. Reversal undoes exactly that delta. Each operation is
a single transaction: it either fully applies or leaves nothing behind.

Usage:
    assembly = workshop.create(AssemblyRequest(
        bom_id=bom.pk,
        assembly_name='Run 7',
        quantity=3,
        user_id=user.pk,
        component_sources=(
            ComponentSource('PART-A', 'acme'),
            ComponentSource('PART-B', None),  # internal source
        ),
    ))
    workshop.reverse(assembly.pk, user.pk)
"""

import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction

from assemblyman.conf import assemblyman_settings
from assemblyman.exceptions import AssemblyError
from assemblyman.models.assembly import (
    Assembly,
    AssemblyUnit,
    ComponentUsage,
    UnitComponentSerial,
)
from assemblyman.models.bom import BOM
from assemblyman.models.enums import ActivityAction
from assemblyman.models.lot import Lot
from assemblyman.models.vendor import Vendor
from assemblyman.services.activity import log_activity
from assemblyman.services.movements import StockMovements, source_code
from assemblyman.services.queries import StockQueries
from assemblyman.services.resolver import parse_quantity

logger = logging.getLogger('assemblyman')


def _get_user(user_id):
    if user_id is None:
        raise AssemblyError('USER_REQUIRED')
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise AssemblyError('USER_NOT_FOUND', user_id=user_id) from None


def _get_vendor(vendor_id):
    """Vendor for a source id; None or the internal code mean internal."""
    if vendor_id in (None, '', assemblyman_settings.INTERNAL_SOURCE_CODE):
        return None
    try:
        return Vendor.objects.get(code=vendor_id)
    except Vendor.DoesNotExist:
        raise AssemblyError('VENDOR_NOT_FOUND', vendor=vendor_id) from None


def _clean_component_serials(fitted_by_code, components) -> list:
    """
    Validate serials of fitted components against what one unit takes.

    Args:
        fitted_by_code: Item.code -> (component, quantity per unit)
        components: Item.code -> serials

    Returns:
        List of (component, [serial, ...]) with blank serials dropped

    Raises:
        AssemblyError('UNKNOWN_COMPONENT'): Component is not on the BOM
        AssemblyError('INVALID_SERIAL'): Component is not serial tracked,
            or more serials than fitted per unit
    """
    cleaned = []
    for code, serials in components.items():
        if code not in fitted_by_code:
            raise AssemblyError('UNKNOWN_COMPONENT', component=code)
        component, per_unit = fitted_by_code[code]
        if not component.is_serial_tracked:
            raise AssemblyError(
                'INVALID_SERIAL',
                f"{component.code} is not serial tracked",
                component=component.code,
            )
        serials = [str(s).strip() for s in serials if str(s).strip()]
        if len(serials) > per_unit:
            raise AssemblyError(
                'INVALID_SERIAL',
                f"{component.code} takes at most {per_unit} serials per unit",
                component=component.code,
                requested=len(serials),
                available=per_unit,
            )
        cleaned.append((component, serials))
    return cleaned


class AssemblyRuns:
    """Assembly create/reverse methods."""

    @classmethod
    def create(cls, request) -> Assembly:
        """
        Create an assembly run.

        Args:
            request: AssemblyRequest

        Returns:
            The new Assembly

        Raises:
            AssemblyError: Validation codes before anything is written;
                'INSUFFICIENT_QUANTITY' if a chosen source cannot cover
                its component, now or at write time

        Concurrency:
            - Runs under transaction.atomic()
            - Each component draw locks the source's lots and decrements
              conditionally; a concurrent run that consumed the stock
              first makes this one fail and roll back
        """
        if request.bom_id in (None, ''):
            raise AssemblyError('BOM_REQUIRED')

        name = (request.assembly_name or '').strip()
        if not name:
            raise AssemblyError('NAME_REQUIRED')

        quantity = parse_quantity(request.quantity)
        if quantity <= 0 or quantity != quantity.to_integral_value():
            raise AssemblyError('INVALID_QUANTITY', requested=request.quantity)
        units = int(quantity)

        user = _get_user(request.user_id)

        try:
            bom = BOM.objects.select_related('item').get(pk=request.bom_id)
        except (BOM.DoesNotExist, ValueError, TypeError):
            raise AssemblyError('BOM_NOT_FOUND', bom_id=request.bom_id) from None

        lines = list(bom.lines.select_related('component'))
        if not lines:
            raise AssemblyError('BOM_EMPTY', bom_id=bom.pk)
        if any(line.component_id == bom.item_id for line in lines):
            raise AssemblyError('BOM_SELF_REFERENCE', bom_id=bom.pk, item=bom.item.code)

        lines_by_code = {line.component.code: line for line in lines}
        seen = set()
        for source in request.component_sources:
            if source.component_id not in lines_by_code:
                raise AssemblyError('UNKNOWN_COMPONENT', component=source.component_id)
            if source.component_id in seen:
                raise AssemblyError('DUPLICATE_SOURCE', component=source.component_id)
            seen.add(source.component_id)

        unsourced = [
            code for code in lines_by_code
            if request.source_for(code) is None
        ]
        if unsourced:
            raise AssemblyError(
                'SOURCE_REQUIRED',
                f"Choose a vendor source for: {', '.join(unsourced)}",
                components=unsourced,
            )

        plan = []  # (line, vendor, required)
        for line in lines:
            vendor = _get_vendor(request.source_for(line.component.code).vendor_id)
            plan.append((line, vendor, line.required_for(units)))

        fitted_by_code = {
            code: (line.component, line.quantity) for code, line in lines_by_code.items()
        }
        unit_serials = {}
        for entry in request.serial_numbers:
            if not 1 <= entry.unit_number <= units:
                raise AssemblyError(
                    'INVALID_SERIAL',
                    f"Unit {entry.unit_number} is outside 1..{units}",
                    unit_number=entry.unit_number,
                )
            unit_serials[entry.unit_number] = (
                (entry.serial_number or '').strip(),
                _clean_component_serials(fitted_by_code, entry.components),
            )

        # Unlocked pre-check, reports every shortage at once
        shortages = []
        for line, vendor, required in plan:
            available = StockQueries.stock_current(line.component, vendor, by_vendor=True)
            if available < required:
                shortages.append({
                    'component': line.component.code,
                    'vendor': source_code(vendor),
                    'available': available,
                    'requested': required,
                })
        if shortages:
            first = shortages[0]
            raise AssemblyError(
                'INSUFFICIENT_QUANTITY',
                "Insufficient stock: " + "; ".join(
                    f"{s['component']} from {s['vendor']} "
                    f"(needs {s['requested']}, has {s['available']})"
                    for s in shortages
                ),
                shortages=[
                    {k: str(v) if isinstance(v, Decimal) else v for k, v in s.items()}
                    for s in shortages
                ],
                **first,
            )

        with transaction.atomic():
            assembly = Assembly.objects.create(
                bom=bom,
                item=bom.item,
                name=name,
                quantity=units,
                po_number=(request.po_number or '').strip(),
                created_by=user,
            )
            reason = f"Assembly #{assembly.pk}: {name}"

            usages = []
            for line, vendor, required in plan:
                drawn = StockMovements.draw(
                    required,
                    line.component,
                    vendor=vendor,
                    reference=assembly,
                    user=user,
                    reason=reason,
                )
                usages.extend(
                    ComponentUsage(
                        assembly=assembly,
                        component=line.component,
                        lot=lot,
                        quantity=taken,
                    )
                    for lot, taken in drawn
                )
            ComponentUsage.objects.bulk_create(usages)

            AssemblyUnit.objects.bulk_create(
                AssemblyUnit(
                    assembly=assembly,
                    unit_number=number,
                    serial_number=unit_serials.get(number, ('', []))[0],
                )
                for number in range(1, units + 1)
            )
            if unit_serials:
                # bulk_create leaves pks unset on some backends
                units_by_number = {
                    unit.unit_number: unit
                    for unit in assembly.units.filter(unit_number__in=unit_serials)
                }
                UnitComponentSerial.objects.bulk_create(
                    UnitComponentSerial(
                        unit=units_by_number[number],
                        component=component,
                        serial_number=s,
                    )
                    for number, (_, fitted) in unit_serials.items()
                    for component, serials in fitted
                    for s in serials
                )

            StockMovements.receive(
                Decimal(units),
                assembly.item,
                vendor=None,
                reference=assembly,
                user=user,
                reason=reason,
            )

            log_activity(user, ActivityAction.CREATE_ASSEMBLY, {
                'assemblyId': assembly.pk,
                'assemblyName': name,
                'bomId': bom.pk,
                'bomName': bom.name,
                'quantity': units,
                'poNumber': assembly.po_number or None,
                'components': [
                    {
                        'componentId': line.component.code,
                        'vendorId': source_code(vendor),
                        'quantity': required,
                    }
                    for line, vendor, required in plan
                ],
            })

            logger.info(
                "assembly.created",
                extra={
                    "assembly_id": assembly.pk,
                    "bom_id": bom.pk,
                    "units": units,
                    "user_id": user.pk,
                },
            )
            return assembly

    @classmethod
    def reverse(cls, assembly_id, user_id) -> dict:
        """
        Delete an assembly run and undo its stock delta.

        Every consumed quantity goes back to the lot it was drawn from,
        and the produced units leave the assembled item's internal lot.
        Stock moved independently since creation is left alone.

        Returns:
            Summary dict of what was reversed

        Raises:
            AssemblyError: 'ASSEMBLY_NOT_FOUND', 'USER_NOT_FOUND', or
                'INSUFFICIENT_QUANTITY' when produced units were already
                consumed. The message always says nothing was changed.
        """
        try:
            return cls._reverse(assembly_id, user_id)
        except AssemblyError as exc:
            logger.warning(
                "assembly.reverse.failed",
                extra={"assembly_id": assembly_id, "code": exc.code},
            )
            raise AssemblyError(
                exc.code,
                f"Assembly could not be deleted: {exc.message}. No changes were made.",
                **exc.data,
            ) from exc

    @classmethod
    def _reverse(cls, assembly_id, user_id) -> dict:
        user = _get_user(user_id)

        with transaction.atomic():
            try:
                assembly = (
                    Assembly.objects.select_for_update()
                    .select_related('item')
                    .get(pk=assembly_id)
                )
            except (Assembly.DoesNotExist, ValueError, TypeError):
                raise AssemblyError('ASSEMBLY_NOT_FOUND', assembly_id=assembly_id) from None

            reason = f"Reversal of assembly #{assembly.pk}: {assembly.name}"
            usages = list(assembly.usages.select_related('component', 'lot__vendor'))

            # Lock restored lots in a stable order
            list(
                Lot.objects.select_for_update()
                .filter(pk__in={u.lot_id for u in usages})
                .order_by('pk')
            )

            restored = []
            for usage in usages:
                StockMovements.restore(
                    usage.quantity,
                    usage.lot,
                    reference=assembly,
                    user=user,
                    reason=reason,
                )
                restored.append({
                    'componentId': usage.component.code,
                    'vendorId': source_code(usage.lot.vendor),
                    'batch': usage.lot.batch,
                    'quantity': usage.quantity,
                })

            StockMovements.draw(
                Decimal(assembly.quantity),
                assembly.item,
                vendor=None,
                reference=assembly,
                user=user,
                reason=reason,
            )

            summary = {
                'assemblyId': assembly.pk,
                'assemblyName': assembly.name,
                'bomId': assembly.bom_id,
                'quantity': assembly.quantity,
                'restored': restored,
            }

            UnitComponentSerial.objects.filter(unit__assembly=assembly).delete()
            assembly.units.all().delete()
            assembly.usages.all().delete()
            assembly.delete()

            log_activity(user, ActivityAction.DELETE_ASSEMBLY, summary)
            logger.info(
                "assembly.reversed",
                extra={
                    "assembly_id": summary['assemblyId'],
                    "units": summary['quantity'],
                    "user_id": user.pk,
                },
            )
            return summary

    @classmethod
    def set_unit_serials(cls, unit_id, serial_number='',
                         component_serials=None, user_id=None) -> AssemblyUnit:
        """
        Record serial numbers on one produced unit.

        Sets the unit's own serial and replaces the serials of each
        component named in ``component_serials`` (Item.code -> serials).
        Components not named keep their serials.

        Raises:
            AssemblyError('UNIT_NOT_FOUND'): Unknown unit
            AssemblyError('UNKNOWN_COMPONENT'): Component is not on the BOM
            AssemblyError('INVALID_SERIAL'): See _clean_component_serials
        """
        user = _get_user(user_id)
        try:
            unit = AssemblyUnit.objects.select_related('assembly').get(pk=unit_id)
        except (AssemblyUnit.DoesNotExist, ValueError, TypeError):
            raise AssemblyError('UNIT_NOT_FOUND', unit_id=unit_id) from None

        fitted_by_code = {
            component.code: (component, per_unit)
            for component, _, per_unit in unit.assembly.consumed()
        }
        fitted = _clean_component_serials(fitted_by_code, component_serials or {})

        with transaction.atomic():
            unit.serial_number = (serial_number or '').strip()
            unit.save(update_fields=['serial_number'])

            for component, serials in fitted:
                unit.component_serials.filter(component=component).delete()
                UnitComponentSerial.objects.bulk_create(
                    UnitComponentSerial(unit=unit, component=component, serial_number=s)
                    for s in serials
                )

            log_activity(user, ActivityAction.UPDATE_SERIALS, {
                'assemblyId': unit.assembly_id,
                'unitNumber': unit.unit_number,
                'serialNumber': unit.serial_number,
                'components': {component.code: serials for component, serials in fitted},
            })
            logger.info(
                "assembly.unit.serials",
                extra={"unit_id": unit.pk, "user_id": user.pk},
            )
            return unit

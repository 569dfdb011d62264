"""
Stock movements — state-changing operations (receive, issue, adjust, draw).

All methods use transaction.atomic() with appropriate locking.
"""

import logging
from decimal import Decimal

from django.db import transaction

from assemblyman.conf import assemblyman_settings
from assemblyman.exceptions import AssemblyError
from assemblyman.models.lot import Lot
from assemblyman.models.move import Move

logger = logging.getLogger('assemblyman')


def source_code(vendor) -> str:
    """Identifier of a vendor source as clients see it."""
    if vendor is None:
        return assemblyman_settings.INTERNAL_SOURCE_CODE
    return vendor.code


class StockMovements:
    """State-changing stock movement methods."""

    @classmethod
    def receive(cls, quantity, item, vendor=None, batch='',
                reference=None, user=None, reason='Receipt', **metadata):
        """
        Stock entry.

        Creates or updates the Lot at (item, vendor, batch).
        Creates Move with positive delta.

        Concurrency:
            - Runs under transaction.atomic()
            - Uses get_or_create with defaults
            - Move.save() updates _quantity atomically
        """
        if quantity <= 0:
            raise AssemblyError('INVALID_QUANTITY', requested=quantity)

        with transaction.atomic():
            lot, created = Lot.objects.get_or_create(
                item=item,
                vendor=vendor,
                batch=batch,
                defaults={'metadata': metadata}
            )

            Move.objects.create(
                lot=lot,
                delta=quantity,
                reference=reference,
                reason=reason,
                user=user,
                metadata=metadata
            )

            lot.refresh_from_db()
            logger.info(
                "stock.receive",
                extra={
                    "item": item.code,
                    "qty": str(quantity),
                    "source": source_code(vendor),
                    "reason": reason,
                    "lot_id": lot.pk,
                },
            )
            return lot

    @classmethod
    def issue(cls, quantity, lot,
              reference=None, user=None, reason='Issue'):
        """
        Stock exit from one lot.

        Raises:
            AssemblyError('INSUFFICIENT_QUANTITY'): If quantity > lot quantity
            AssemblyError('INVALID_QUANTITY'): If quantity <= 0

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on Lot
            - Move.save() decrements only if enough is left
        """
        if quantity <= 0:
            raise AssemblyError('INVALID_QUANTITY', requested=quantity)

        with transaction.atomic():
            locked_lot = Lot.objects.select_for_update().get(pk=lot.pk)

            if locked_lot.quantity < quantity:
                raise AssemblyError(
                    'INSUFFICIENT_QUANTITY',
                    component=locked_lot.item.code,
                    vendor=source_code(locked_lot.vendor),
                    available=locked_lot.quantity,
                    requested=quantity
                )

            move = Move.objects.create(
                lot=locked_lot,
                delta=-quantity,
                reference=reference,
                reason=reason,
                user=user
            )
            logger.info(
                "stock.issue",
                extra={
                    "lot_id": lot.pk,
                    "qty": str(quantity),
                    "reason": reason,
                },
            )
            return move

    @classmethod
    def restore(cls, quantity, lot,
                reference=None, user=None, reason='Return'):
        """
        Put quantity back into a specific lot.

        Used to undo an earlier draw: the stock goes back to the exact
        lot it came from, not to whichever lot is newest.
        """
        if quantity <= 0:
            raise AssemblyError('INVALID_QUANTITY', requested=quantity)

        move = Move.objects.create(
            lot=lot,
            delta=quantity,
            reference=reference,
            reason=reason,
            user=user
        )
        logger.info(
            "stock.restore",
            extra={
                "lot_id": lot.pk,
                "qty": str(quantity),
                "reason": reason,
            },
        )
        return move

    @classmethod
    def adjust(cls, lot, new_quantity, reason, user=None):
        """
        Inventory count adjustment.

        Calculates delta automatically: new_quantity - lot.quantity

        Raises:
            AssemblyError('REASON_REQUIRED'): If reason is empty
            AssemblyError('INVALID_QUANTITY'): If new_quantity < 0
        """
        if not reason:
            raise AssemblyError('REASON_REQUIRED')
        if new_quantity < 0:
            raise AssemblyError('INVALID_QUANTITY', requested=new_quantity)

        with transaction.atomic():
            locked_lot = Lot.objects.select_for_update().get(pk=lot.pk)
            delta = new_quantity - locked_lot._quantity

            if delta == 0:
                return None

            move = Move.objects.create(
                lot=locked_lot,
                delta=delta,
                reason=f"Adjustment: {reason}",
                user=user
            )
            logger.info(
                "stock.adjust",
                extra={
                    "lot_id": lot.pk,
                    "delta": str(delta),
                    "reason": reason,
                },
            )
            return move

    @classmethod
    def draw(cls, quantity, item, vendor=None,
             reference=None, user=None, reason='Issue') -> list[tuple[Lot, Decimal]]:
        """
        Take ``quantity`` of an item from one vendor source.

        Lots of that vendor are consumed oldest first. The whole amount
        must come from the one source; nothing is taken otherwise.

        Returns:
            List of (lot, quantity taken) in the order consumed

        Raises:
            AssemblyError('INSUFFICIENT_QUANTITY'): If the source holds
                less than quantity, at lock time or at write time

        Concurrency:
            - Runs under transaction.atomic()
            - Locks the source's lots with select_for_update()
            - Each Move.save() decrements only if enough is left, so a
              concurrent draw that got there first makes this one fail
        """
        if quantity <= 0:
            raise AssemblyError('INVALID_QUANTITY', requested=quantity)

        with transaction.atomic():
            lots = list(
                Lot.objects.select_for_update()
                .for_item(item)
                .from_vendor(vendor)
                .in_stock()
                .order_by('created_at', 'pk')
            )
            available = sum((lot._quantity for lot in lots), Decimal('0'))

            if available < quantity:
                raise AssemblyError(
                    'INSUFFICIENT_QUANTITY',
                    component=item.code,
                    vendor=source_code(vendor),
                    available=available,
                    requested=quantity,
                )

            drawn = []
            remaining = quantity
            for lot in lots:
                if remaining <= 0:
                    break
                take = min(remaining, lot._quantity)
                try:
                    Move.objects.create(
                        lot=lot,
                        delta=-take,
                        reference=reference,
                        reason=reason,
                        user=user,
                    )
                except AssemblyError as exc:
                    raise AssemblyError(
                        'INSUFFICIENT_QUANTITY',
                        component=item.code,
                        vendor=source_code(vendor),
                        available=exc.available,
                        requested=quantity,
                    ) from exc
                drawn.append((lot, take))
                remaining -= take

            logger.info(
                "stock.draw",
                extra={
                    "item": item.code,
                    "qty": str(quantity),
                    "source": source_code(vendor),
                    "lots": [lot.pk for lot, _ in drawn],
                },
            )
            return drawn

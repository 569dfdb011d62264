"""
Reorder alerts — items at or below their reorder level.

Usage:
    from assemblyman.services.alerts import check_reorder

    # Run after stock changes or from a periodic job
    for item, current in check_reorder():
        print(f"Reorder {item.code}: {current} left")
"""

import logging
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce

from assemblyman.models.item import Item

logger = logging.getLogger('assemblyman')


def check_reorder(item=None) -> list[tuple[Item, Decimal]]:
    """
    Items whose current stock is at or below their reorder level.

    Items with a reorder level of 0 never trigger.

    Args:
        item: Optional item to check (None = all).

    Returns:
        List of (item, current_stock) tuples.
    """
    qs = Item.objects.filter(stock_reorder__gt=0)
    if item is not None:
        qs = qs.filter(pk=item.pk)

    qs = qs.annotate(
        current=Coalesce(Sum('lots___quantity'), Decimal('0'))
    ).order_by('code')

    triggered = []
    for candidate in qs:
        if candidate.current <= candidate.stock_reorder:
            triggered.append((candidate, candidate.current))
            logger.warning(
                "stock.reorder.triggered",
                extra={
                    "item": candidate.code,
                    "reorder_level": str(candidate.stock_reorder),
                    "current": str(candidate.current),
                },
            )

    return triggered

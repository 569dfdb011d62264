"""
Stock queries — read-only operations.

All methods are classmethod on Workshop and use no locking.
"""

from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce

from assemblyman.models.lot import Lot


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def stock_current(cls, item, vendor=None, by_vendor: bool = False) -> Decimal:
        """
        Current quantity of an item.

        Args:
            item: Item instance
            vendor: Restrict to one vendor source
            by_vendor: Apply the vendor filter even when vendor is None
                (selects the internal source)

        Returns:
            Decimal with summed lot quantities
        """
        lots = Lot.objects.for_item(item)
        if vendor is not None or by_vendor:
            lots = lots.from_vendor(vendor)
        return lots.aggregate(
            t=Coalesce(Sum('_quantity'), Decimal('0'))
        )['t']

    @classmethod
    def list_lots(cls, item=None, vendor=None, by_vendor: bool = False,
                  include_empty: bool = False):
        """List lots with filters, oldest first."""
        qs = Lot.objects.select_related('item', 'vendor')

        if item is not None:
            qs = qs.for_item(item)

        if vendor is not None or by_vendor:
            qs = qs.from_vendor(vendor)

        if not include_empty:
            qs = qs.in_stock()

        return qs.order_by('created_at', 'pk')

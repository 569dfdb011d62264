"""
Workshop Service — The single public interface for assembly operations.

Usage:
    from assemblyman import workshop, AssemblyError

    sourcing = workshop.resolve(bom, 3)
    assembly = workshop.create(request)
    workshop.reverse(assembly.pk, user.pk)
"""

from assemblyman.services.alerts import check_reorder
from assemblyman.services.movements import StockMovements
from assemblyman.services.queries import StockQueries
from assemblyman.services.reporting import AssemblyReports
from assemblyman.services.resolver import VendorResolver
from assemblyman.services.runs import AssemblyRuns


class Workshop(
    StockQueries,
    StockMovements,
    VendorResolver,
    AssemblyRuns,
    AssemblyReports,
):
    """
    Single interface for stock and assembly operations.

    Parameter convention: (quantity, item, vendor, ...)
    Follows natural language: "Receive 50 of part A from Acme"

    IMPORTANT: All state-changing methods use atomic transactions
    with appropriate locking. See each method's docstring.
    """

    @classmethod
    def check_reorder(cls, item=None):
        return check_reorder(item)

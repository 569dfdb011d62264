"""
Assemblyman services — modular organization of workshop operations.

    from assemblyman.services import StockQueries, StockMovements, VendorResolver, AssemblyRuns
"""

from assemblyman.services.movements import StockMovements
from assemblyman.services.queries import StockQueries
from assemblyman.services.reporting import AssemblyReports
from assemblyman.services.resolver import VendorResolver
from assemblyman.services.runs import AssemblyRuns

__all__ = [
    'StockQueries',
    'StockMovements',
    'VendorResolver',
    'AssemblyRuns',
    'AssemblyReports',
]

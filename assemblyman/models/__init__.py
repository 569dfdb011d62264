"""
Assemblyman Models.

Core models for BOM-driven assembly:
- Vendor: Who supplied stock
- Item: Inventory item (component or assembled good)
- Lot: Quantity cache per item/vendor/batch
- Move: Immutable ledger of changes
- BOM, BOMLine: What an assembled item is made of
- Assembly, AssemblyUnit, ComponentUsage, UnitComponentSerial: Runs and traceability
- ActivityLog: Append-only audit of user actions
"""

from assemblyman.models.activity import ActivityLog
from assemblyman.models.assembly import (
    Assembly,
    AssemblyUnit,
    ComponentUsage,
    UnitComponentSerial,
)
from assemblyman.models.bom import BOM, BOMLine
from assemblyman.models.enums import ActivityAction
from assemblyman.models.item import Item
from assemblyman.models.lot import Lot
from assemblyman.models.move import Move
from assemblyman.models.vendor import Vendor

__all__ = [
    'ActivityAction',
    'Vendor',
    'Item',
    'Lot',
    'Move',
    'BOM',
    'BOMLine',
    'Assembly',
    'AssemblyUnit',
    'ComponentUsage',
    'UnitComponentSerial',
    'ActivityLog',
]

"""
Django Assemblyman — BOM-driven assembly over a vendor stock ledger.

Usage:
    from assemblyman import workshop, AssemblyError

    workshop.receive(10, part_a, vendor=acme)
    workshop.resolve(bom, 3)
    workshop.create(request)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'workshop':
        from assemblyman.service import Workshop
        return Workshop
    elif name == 'AssemblyError':
        from assemblyman.exceptions import AssemblyError
        return AssemblyError
    elif name == 'AssemblyRequest':
        from assemblyman.protocols.assembly import AssemblyRequest
        return AssemblyRequest
    elif name == 'ComponentSource':
        from assemblyman.protocols.assembly import ComponentSource
        return ComponentSource
    elif name == 'Item':
        from assemblyman.models.item import Item
        return Item
    elif name == 'Vendor':
        from assemblyman.models.vendor import Vendor
        return Vendor
    elif name == 'Lot':
        from assemblyman.models.lot import Lot
        return Lot
    elif name == 'Move':
        from assemblyman.models.move import Move
        return Move
    elif name == 'BOM':
        from assemblyman.models.bom import BOM
        return BOM
    elif name == 'Assembly':
        from assemblyman.models.assembly import Assembly
        return Assembly
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'workshop',
    'AssemblyError',
    'AssemblyRequest',
    'ComponentSource',
    'Item',
    'Vendor',
    'Lot',
    'Move',
    'BOM',
    'Assembly',
]

__version__ = '0.1.0'

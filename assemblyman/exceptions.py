"""
Exceptions for Assemblyman.

All errors are AssemblyError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Error with a stable code, a human message and context data.

    Subclasses provide ``_default_messages`` so callers can raise with
    just a code and keyword context:

        raise AssemblyError('BOM_NOT_FOUND', bom_id=42)
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class AssemblyError(BaseError):
    """
    Structured exception for assembly and stock operations.

    Usage:
        try:
            workshop.create(request)
        except AssemblyError as e:
            if e.code == 'INSUFFICIENT_QUANTITY':
                print(f"{e.data['component']}: only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'BOM_REQUIRED': 'A bill of materials must be selected',
        'BOM_NOT_FOUND': 'Bill of materials not found',
        'BOM_EMPTY': 'Bill of materials has no components',
        'BOM_SELF_REFERENCE': 'Bill of materials lists its own assembled item as a component',
        'NAME_REQUIRED': 'Assembly name is required',
        'INVALID_QUANTITY': 'Invalid quantity (must be positive)',
        'SOURCE_REQUIRED': 'Every component needs a vendor source',
        'DUPLICATE_SOURCE': 'Each component takes exactly one vendor source',
        'UNKNOWN_COMPONENT': 'Component is not part of this bill of materials',
        'VENDOR_NOT_FOUND': 'Vendor not found',
        'USER_REQUIRED': 'Acting user is required',
        'USER_NOT_FOUND': 'User not found',
        'INSUFFICIENT_QUANTITY': 'Insufficient stock for this component',
        'ITEM_NOT_FOUND': 'Item not found',
        'ASSEMBLY_NOT_FOUND': 'Assembly not found',
        'UNIT_NOT_FOUND': 'Assembly unit not found',
        'INVALID_SERIAL': 'Invalid serial numbers for this unit',
        'REASON_REQUIRED': 'Reason is required',
    }

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }

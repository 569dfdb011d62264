"""
Assembly request types.

Explicit request structs for the two orchestrator operations. The HTTP
layer validates JSON into these; the workshop service only ever sees them.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ComponentSource:
    """Chosen vendor source for one BOM component."""

    component_id: str  # Item.code
    vendor_id: str | None  # Vendor.code, None = internal source


@dataclass(frozen=True)
class UnitSerials:
    """Serials to record on one unit at creation time."""

    unit_number: int
    serial_number: str = ""
    # Item.code -> serials of that component fitted into the unit
    components: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class AssemblyRequest:
    """Create-assembly request."""

    bom_id: int | None
    assembly_name: str
    quantity: int
    user_id: int | None
    component_sources: tuple[ComponentSource, ...] = ()
    po_number: str | None = None
    serial_numbers: tuple[UnitSerials, ...] = ()

    def source_for(self, component_id: str) -> ComponentSource | None:
        for source in self.component_sources:
            if source.component_id == component_id:
                return source
        return None


@dataclass(frozen=True)
class ReverseRequest:
    """Reverse-assembly request."""

    assembly_id: int
    user_id: int | None

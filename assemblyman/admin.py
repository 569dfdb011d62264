"""
Assemblyman Admin.

Catalog models are editable; everything the workshop service writes is
read-only here:
- Vendor, Item: list + edit
- BOM: edit with inline lines
- Lot: read-only (item, vendor, batch, quantity)
- Move: read-only audit trail (timestamp, delta, reason)
- Assembly: read-only with units/usages inline and a "reverse" action
- ActivityLog: read-only
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from assemblyman.exceptions import AssemblyError
from assemblyman.models import (
    BOM,
    ActivityLog,
    Assembly,
    AssemblyUnit,
    BOMLine,
    ComponentUsage,
    Item,
    Lot,
    Move,
    Vendor,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """Rows written only by the workshop service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'email', 'phone']
    search_fields = ['code', 'name', 'legal_name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin — current stock is derived from lots."""

    list_display = ['code', 'name', 'unit', 'group', 'stock_display',
                    'stock_reorder', 'is_serial_tracked']
    list_filter = ['group', 'item_class', 'is_serial_tracked']
    search_fields = ['code', 'name', 'display_name']
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description=_('Current stock'))
    def stock_display(self, obj):
        return obj.stock_current


class BOMLineInline(admin.TabularInline):
    model = BOMLine
    extra = 1
    autocomplete_fields = ['component']


@admin.register(BOM)
class BOMAdmin(admin.ModelAdmin):
    list_display = ['name', 'item', 'created_by', 'updated_at']
    search_fields = ['name', 'item__code', 'item__name']
    autocomplete_fields = ['item']
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    inlines = [BOMLineInline]

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


# =========================================================================
# LEDGER (read-only)
# =========================================================================

@admin.register(Lot)
class LotAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Lot admin — read-only. Stock only changes via the workshop service."""

    list_display = ['item', 'vendor', 'batch', 'quantity_display', 'updated_at']
    list_filter = ['vendor']
    search_fields = ['item__code', 'item__name', 'batch']
    readonly_fields = ['item', 'vendor', 'batch', '_quantity', 'metadata',
                       'created_at', 'updated_at']

    @admin.display(description=_('Quantity'))
    def quantity_display(self, obj):
        return obj.quantity


@admin.register(Move)
class MoveAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Move admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'lot', 'delta', 'reason', 'user']
    list_filter = ['timestamp', 'user']
    search_fields = ['reason']
    readonly_fields = ['lot', 'delta', 'reference_type', 'reference_id',
                       'reason', 'metadata', 'timestamp', 'user']
    date_hierarchy = 'timestamp'


# =========================================================================
# ASSEMBLY RUNS (read-only with reverse action)
# =========================================================================

class AssemblyUnitInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = AssemblyUnit
    fields = ['unit_number', 'serial_number']
    readonly_fields = fields
    extra = 0


class ComponentUsageInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = ComponentUsage
    fields = ['component', 'lot', 'quantity']
    readonly_fields = fields
    extra = 0


@admin.register(Assembly)
class AssemblyAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Assembly admin — runs are created through the API, reversed here."""

    list_display = ['name', 'bom', 'item', 'quantity', 'po_number', 'created_by', 'created_at']
    list_filter = ['created_at', 'bom']
    search_fields = ['name', 'po_number', 'bom__name']
    readonly_fields = ['bom', 'item', 'name', 'quantity', 'po_number', 'created_by', 'created_at']
    inlines = [AssemblyUnitInline, ComponentUsageInline]
    actions = ['reverse_assemblies']

    @admin.action(description=_('Reverse selected assemblies'))
    def reverse_assemblies(self, request, queryset):
        from assemblyman import workshop

        count = 0
        for assembly in queryset:
            try:
                workshop.reverse(assembly.pk, request.user.pk)
                count += 1
            except AssemblyError as exc:
                logger.warning("reverse_assemblies: %s: %s", assembly.pk, exc)
                self.message_user(request, exc.message, level=messages.ERROR)

        self.message_user(request, _('{count} assembly run(s) reversed.').format(count=count))


@admin.register(ActivityLog)
class ActivityLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['created_at', 'action', 'user']
    list_filter = ['action', 'created_at']
    readonly_fields = ['user', 'action', 'details', 'created_at']
    date_hierarchy = 'created_at'

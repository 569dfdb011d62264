"""
Tests for vendor availability resolution.
"""

from decimal import Decimal

import pytest

from assemblyman import AssemblyError, workshop
from assemblyman.services.resolver import VendorStock, parse_quantity


pytestmark = pytest.mark.django_db


def codes(stocks):
    return [stock.source_code for stock in stocks]


class TestParseQuantity:
    """Quantities may arrive as numeric-looking strings."""

    @pytest.mark.parametrize('value, expected', [
        (6, Decimal('6')),
        ('6', Decimal('6')),
        (' 6.5 ', Decimal('6.5')),
        (Decimal('2.25'), Decimal('2.25')),
        (1.5, Decimal('1.5')),
    ])
    def test_numeric_values(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize('value', ['abc', '', None, True, 'NaN', 'Infinity', [1]])
    def test_non_numeric_values(self, value):
        with pytest.raises(AssemblyError) as exc:
            parse_quantity(value)

        assert exc.value.code == 'INVALID_QUANTITY'


class TestVendorStock:
    """Tests for workshop.vendor_stock()."""

    def test_lists_sources_internal_last(self, stocked, part_b):
        stocks = workshop.vendor_stock(part_b)

        assert codes(stocks) == ['acme', 'internal']
        assert stocks[0].vendor_name == 'Acme Parts'
        assert stocks[1].vendor_id is None
        assert stocks[1].vendor_name == 'Internal'
        assert stocks[1].available == Decimal('5')

    def test_sums_batches_of_one_vendor(self, stocked, part_a, acme):
        workshop.receive(Decimal('4'), part_a, vendor=acme, batch='PO-2')

        stocks = workshop.vendor_stock(part_a)

        assert codes(stocks) == ['acme', 'globex']
        assert stocks[0].available == Decimal('10')

    def test_empty_sources_are_omitted(self, stocked, part_a, globex):
        workshop.draw(Decimal('20'), part_a, vendor=globex)

        assert codes(workshop.vendor_stock(part_a)) == ['acme']

    def test_as_dict(self, stocked, part_b):
        data = workshop.vendor_stock(part_b)[1].as_dict()

        assert data['vendorId'] is None
        assert data['vendorName'] == 'Internal'
        assert data['sourceCode'] == 'internal'
        assert Decimal(data['stockAvailable']) == Decimal('5')


class TestQualifyingVendors:
    """The boundary is inclusive and string quantities are parsed."""

    def test_exact_boundary_passes(self):
        stocks = [VendorStock('acme', 'Acme', '6')]

        assert workshop.qualifying_vendors(stocks, 6) == stocks

    def test_one_short_fails(self):
        stocks = [VendorStock('acme', 'Acme', '5')]

        assert workshop.qualifying_vendors(stocks, 6) == []

    def test_mixed_sources(self):
        stocks = [
            VendorStock('acme', 'Acme', Decimal('6')),
            VendorStock('globex', 'Globex', '5.999'),
            VendorStock(None, 'Internal', '10'),
        ]

        assert codes(workshop.qualifying_vendors(stocks, '6')) == ['acme', 'internal']


class TestResolve:
    """Tests for workshop.resolve()."""

    def test_widget_three_units(self, stocked, widget_bom):
        """3 units need 6x A and 3x B; acme's 6 A satisfies exactly."""
        sourcing = workshop.resolve(widget_bom, 3)

        a, b = sourcing.lines
        assert a.required == Decimal('6')
        assert codes(a.vendors) == ['acme', 'globex']
        assert b.required == Decimal('3')
        assert codes(b.vendors) == ['acme', 'internal']
        assert sourcing.is_satisfiable
        assert sourcing.shortages == []

    def test_quantity_change_drops_vendors(self, stocked, widget_bom):
        """4 units need 8x A; acme's 6 no longer qualifies."""
        sourcing = workshop.resolve(widget_bom, '4')

        assert codes(sourcing.lines[0].vendors) == ['globex']
        assert sourcing.is_satisfiable

    def test_no_qualifying_vendor_blocks(self, stocked, widget_bom):
        """11 units need 11x B; no single source holds that many."""
        sourcing = workshop.resolve(widget_bom, 11)

        assert not sourcing.is_satisfiable
        assert [line.component.code for line in sourcing.shortages] == ['PART-B']

    @pytest.mark.parametrize('units', range(1, 13))
    def test_never_offers_short_vendor(self, stocked, widget_bom, units):
        for line in workshop.resolve(widget_bom, units).lines:
            assert all(stock.available >= line.required for stock in line.vendors)

    @pytest.mark.parametrize('quantity', [0, -1, '1.5', 'many'])
    def test_invalid_quantity(self, widget_bom, quantity):
        with pytest.raises(AssemblyError) as exc:
            workshop.resolve(widget_bom, quantity)

        assert exc.value.code == 'INVALID_QUANTITY'

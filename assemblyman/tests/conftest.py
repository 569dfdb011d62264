"""
Pytest fixtures for Assemblyman tests.

Stock layout after ``stocked``:

    PART-A  acme 6 (PO-1)   globex 20
    PART-B  acme 10         internal 5

The Widget BOM takes 2x PART-A and 1x PART-B per unit.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from assemblyman import workshop
from assemblyman.adapters.activity import reset_activity_sink
from assemblyman.models import BOM, Item, Vendor
from assemblyman.protocols import AssemblyRequest, ComponentSource


User = get_user_model()


@pytest.fixture(autouse=True)
def _fresh_activity_sink():
    reset_activity_sink()
    yield
    reset_activity_sink()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='assembler',
        password='testpass123'
    )


@pytest.fixture
def acme(db):
    return Vendor.objects.create(code='acme', name='Acme Parts')


@pytest.fixture
def globex(db):
    return Vendor.objects.create(code='globex', name='Globex Supply')


@pytest.fixture
def widget(db):
    """The assembled item."""
    return Item.objects.create(code='WIDGET', name='Widget')


@pytest.fixture
def part_a(db):
    return Item.objects.create(code='PART-A', name='Bracket')


@pytest.fixture
def part_b(db):
    """Serial-tracked component."""
    return Item.objects.create(code='PART-B', name='Controller board', is_serial_tracked=True)


@pytest.fixture
def widget_bom(db, widget, part_a, part_b):
    """Widget = 2x PART-A + 1x PART-B."""
    bom = BOM.objects.create(name='Widget v1', item=widget)
    bom.lines.create(component=part_a, quantity=Decimal('2'))
    bom.lines.create(component=part_b, quantity=Decimal('1'))
    return bom


@pytest.fixture
def stocked(db, acme, globex, part_a, part_b):
    """Receive the component stock shown in the module docstring."""
    return {
        'a_acme': workshop.receive(Decimal('6'), part_a, vendor=acme, batch='PO-1'),
        'a_globex': workshop.receive(Decimal('20'), part_a, vendor=globex),
        'b_acme': workshop.receive(Decimal('10'), part_b, vendor=acme),
        'b_internal': workshop.receive(Decimal('5'), part_b),
    }


@pytest.fixture
def make_request(user, widget_bom):
    """Build an AssemblyRequest for the Widget BOM (A from acme, B internal)."""

    def _make(**overrides):
        values = {
            'bom_id': widget_bom.pk,
            'assembly_name': 'Run 1',
            'quantity': 3,
            'user_id': user.pk,
            'component_sources': (
                ComponentSource('PART-A', 'acme'),
                ComponentSource('PART-B', None),
            ),
        }
        values.update(overrides)
        return AssemblyRequest(**values)

    return _make


@pytest.fixture
def api_client():
    """APIClient carrying valid service credentials."""
    client = APIClient()
    client.credentials(
        HTTP_AUTHORIZATION='Bearer test-bearer-token',
        HTTP_APIKEY='test-api-key',
    )
    return client

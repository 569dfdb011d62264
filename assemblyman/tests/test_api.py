"""
Tests for the HTTP API.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from assemblyman import workshop
from assemblyman.models import Assembly, Lot
from assemblyman.services.runs import AssemblyRuns


pytestmark = pytest.mark.django_db


def create_body(bom, user, **overrides):
    body = {
        'bomId': bom.pk,
        'assemblyName': 'Run 1',
        'quantity': 3,
        'userId': user.pk,
        'componentSources': [
            {'componentId': 'PART-A', 'vendorId': 'acme'},
            {'componentId': 'PART-B', 'vendorId': None},
        ],
    }
    body.update(overrides)
    return body


class TestAuthentication:
    """Both the bearer token and the API key are required."""

    URL = '/api/items/PART-A/vendors/'

    def test_no_credentials(self, part_a):
        response = APIClient().get(self.URL)

        assert response.status_code == 401

    def test_bearer_only(self, part_a):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer test-bearer-token')

        assert client.get(self.URL).status_code == 401

    def test_api_key_only(self, part_a):
        client = APIClient()
        client.credentials(HTTP_APIKEY='test-api-key')

        assert client.get(self.URL).status_code == 401

    def test_wrong_token(self, part_a):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer nope', HTTP_APIKEY='test-api-key')

        assert client.get(self.URL).status_code == 401

    def test_valid_credentials(self, api_client, part_a):
        assert api_client.get(self.URL).status_code == 200


class TestCreateEndpoint:
    """POST /api/assemblies/create/"""

    URL = '/api/assemblies/create/'

    def test_created(self, api_client, stocked, widget_bom, user, widget):
        response = api_client.post(self.URL, create_body(widget_bom, user), format='json')

        assert response.status_code == 201
        data = response.json()
        assert data['success'] is True
        assert Assembly.objects.filter(pk=data['assemblyId']).exists()
        assert 'Run 1' in data['message']
        assert workshop.stock_current(widget) == Decimal('3')

    def test_string_quantity(self, api_client, stocked, widget_bom, user):
        response = api_client.post(self.URL, create_body(widget_bom, user, quantity='2'), format='json')

        assert response.status_code == 201

    def test_missing_source(self, api_client, stocked, widget_bom, user):
        body = create_body(widget_bom, user, componentSources=[
            {'componentId': 'PART-A', 'vendorId': 'acme'},
        ])

        response = api_client.post(self.URL, body, format='json')

        assert response.status_code == 400
        data = response.json()
        assert data['code'] == 'SOURCE_REQUIRED'
        assert data['details']['components'] == ['PART-B']
        assert 'PART-B' in data['error']

    def test_duplicate_source(self, api_client, stocked, widget_bom, user, part_a, globex):
        body = create_body(widget_bom, user, componentSources=[
            {'componentId': 'PART-A', 'vendorId': 'acme'},
            {'componentId': 'PART-A', 'vendorId': 'globex'},
            {'componentId': 'PART-B', 'vendorId': None},
        ])

        response = api_client.post(self.URL, body, format='json')

        assert response.status_code == 400
        assert response.json()['code'] == 'DUPLICATE_SOURCE'
        assert response.json()['details']['component'] == 'PART-A'
        assert not Assembly.objects.exists()
        assert workshop.stock_current(part_a, globex) == Decimal('20')

    def test_insufficient_stock(self, api_client, stocked, widget_bom, user):
        response = api_client.post(self.URL, create_body(widget_bom, user, quantity=4), format='json')

        assert response.status_code == 409
        data = response.json()
        assert data['code'] == 'INSUFFICIENT_QUANTITY'
        assert data['details']['component'] == 'PART-A'
        assert data['details']['vendor'] == 'acme'
        assert Decimal(data['details']['available']) == Decimal('6')
        assert Decimal(data['details']['requested']) == Decimal('8')
        assert not Assembly.objects.exists()

    def test_bom_not_found(self, api_client, stocked, widget_bom, user):
        body = create_body(widget_bom, user, bomId=999999)

        response = api_client.post(self.URL, body, format='json')

        assert response.status_code == 404
        assert response.json()['code'] == 'BOM_NOT_FOUND'

    def test_bom_required(self, api_client, stocked, widget_bom, user):
        response = api_client.post(self.URL, create_body(widget_bom, user, bomId=None), format='json')

        assert response.status_code == 400
        assert response.json()['code'] == 'BOM_REQUIRED'

    def test_malformed_body(self, api_client, widget_bom, user):
        body = create_body(widget_bom, user)
        del body['quantity']

        response = api_client.post(self.URL, body, format='json')

        assert response.status_code == 400
        data = response.json()
        assert data['code'] == 'INVALID_REQUEST'
        assert 'quantity' in data['details']

    def test_get_not_allowed(self, api_client):
        assert api_client.get(self.URL).status_code == 405


class TestReverseEndpoint:
    """POST /api/assemblies/reverse/"""

    URL = '/api/assemblies/reverse/'

    def test_reversed(self, api_client, stocked, make_request, user, widget):
        assembly = workshop.create(make_request())

        response = api_client.post(
            self.URL, {'assemblyId': assembly.pk, 'userId': user.pk}, format='json'
        )

        assert response.status_code == 200
        assert response.json()['success'] is True
        assert not Assembly.objects.exists()
        assert workshop.stock_current(widget) == Decimal('0')

    def test_not_found(self, api_client, user):
        response = api_client.post(self.URL, {'assemblyId': 999999, 'userId': user.pk}, format='json')

        assert response.status_code == 404
        data = response.json()
        assert data['code'] == 'ASSEMBLY_NOT_FOUND'
        assert data['error'].startswith('Assembly could not be deleted')

    def test_finished_goods_consumed(self, api_client, stocked, make_request, user, widget):
        assembly = workshop.create(make_request())
        workshop.issue(Decimal('3'), Lot.objects.get(item=widget))

        response = api_client.post(
            self.URL, {'assemblyId': assembly.pk, 'userId': user.pk}, format='json'
        )

        assert response.status_code == 409
        assert 'No changes were made' in response.json()['error']
        assert Assembly.objects.filter(pk=assembly.pk).exists()


class TestSerialsEndpoint:
    """POST /api/units/<id>/serials/"""

    def test_updates_serials(self, api_client, stocked, make_request, user):
        unit = workshop.create(make_request()).units.get(unit_number=2)

        response = api_client.post(
            f'/api/units/{unit.pk}/serials/',
            {'serialNumber': 'SN-2', 'components': {'PART-B': ['B-7']}, 'userId': user.pk},
            format='json',
        )

        assert response.status_code == 200
        assert response.json()['serialNumber'] == 'SN-2'
        assert list(unit.component_serials.values_list('serial_number', flat=True)) == ['B-7']

    def test_invalid_serial(self, api_client, stocked, make_request, user):
        unit = workshop.create(make_request()).units.get(unit_number=1)

        response = api_client.post(
            f'/api/units/{unit.pk}/serials/',
            {'components': {'PART-A': ['A-1']}, 'userId': user.pk},
            format='json',
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_SERIAL'

    def test_unexpected_error(self, api_client, stocked, make_request, user, monkeypatch):
        unit = workshop.create(make_request()).units.get(unit_number=1)

        def broken(cls, *args, **kwargs):
            raise RuntimeError('database went away')

        monkeypatch.setattr(AssemblyRuns, 'set_unit_serials', classmethod(broken))

        response = api_client.post(
            f'/api/units/{unit.pk}/serials/',
            {'serialNumber': 'SN-1', 'userId': user.pk},
            format='json',
        )

        assert response.status_code == 500
        assert response.json() == {
            'error': 'Unexpected error. No changes were made.',
            'code': 'INTERNAL_ERROR',
            'details': {},
        }


class TestAvailabilityEndpoints:
    """Vendor availability lookups."""

    def test_item_vendors(self, api_client, stocked):
        response = api_client.get('/api/items/PART-B/vendors/')

        assert response.status_code == 200
        data = response.json()
        assert data['itemId'] == 'PART-B'
        assert [v['sourceCode'] for v in data['vendors']] == ['acme', 'internal']
        assert data['vendors'][1]['vendorId'] is None

    def test_item_not_found(self, api_client):
        response = api_client.get('/api/items/NOPE/vendors/')

        assert response.status_code == 404
        assert response.json()['code'] == 'ITEM_NOT_FOUND'

    def test_bom_sourcing(self, api_client, stocked, widget_bom):
        response = api_client.get(f'/api/boms/{widget_bom.pk}/sourcing/', {'quantity': '4'})

        assert response.status_code == 200
        data = response.json()
        assert data['quantity'] == 4
        assert data['satisfiable'] is True
        assert [v['vendorId'] for v in data['lines'][0]['vendors']] == ['globex']
        assert Decimal(data['lines'][0]['required']) == Decimal('8')

    def test_bom_sourcing_shortage(self, api_client, stocked, widget_bom):
        response = api_client.get(f'/api/boms/{widget_bom.pk}/sourcing/', {'quantity': 11})

        data = response.json()
        assert data['satisfiable'] is False
        assert data['shortages'] == ['PART-B']

    def test_bom_sourcing_invalid_quantity(self, api_client, widget_bom):
        response = api_client.get(f'/api/boms/{widget_bom.pk}/sourcing/', {'quantity': 'x'})

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_QUANTITY'


class TestReportEndpoints:
    """Pick list and usage reports."""

    def test_picklist_html(self, api_client, stocked, make_request):
        assembly = workshop.create(make_request())

        response = api_client.get(f'/api/assemblies/{assembly.pk}/picklist/')

        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/html')
        assert b'Unit 3 of 3' in response.content

    def test_picklist_failure_is_a_warning(self, api_client):
        response = api_client.get('/api/assemblies/999999/picklist/')

        assert response.status_code == 404
        data = response.json()
        assert data['code'] == 'ASSEMBLY_NOT_FOUND'
        assert data['dismissible'] is True
        assert 'warning' in data

    def test_usage_json(self, api_client, stocked, make_request):
        assembly = workshop.create(make_request())

        response = api_client.get(f'/api/assemblies/{assembly.pk}/usage/')

        assert response.status_code == 200
        data = response.json()
        assert [u['componentId'] for u in data['usages']] == ['PART-A', 'PART-B']
        assert data['usages'][0]['sourcePurchase'] == 'PO-1'
        assert [u['unitNumber'] for u in data['units']] == [1, 2, 3]

    def test_usage_csv(self, api_client, stocked, make_request):
        assembly = workshop.create(make_request())

        response = api_client.get(f'/api/assemblies/{assembly.pk}/usage/', {'export': 'csv'})

        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/csv')
        assert 'attachment' in response['Content-Disposition']
        assert response.content.decode().startswith('assembly_id,')


class TestAdminReverseAction:
    """The admin can reverse runs."""

    def test_reverse_action(self, client, stocked, make_request):
        admin_user = get_user_model().objects.create_superuser('admin', 'admin@example.com', 'pw')
        assembly = workshop.create(make_request())
        client.force_login(admin_user)

        response = client.post('/admin/assemblyman/assembly/', {
            'action': 'reverse_assemblies',
            '_selected_action': [assembly.pk],
        })

        assert response.status_code == 302
        assert not Assembly.objects.exists()

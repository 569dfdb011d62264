"""
HTTP API for assembly runs, vendor availability and reports.

Errors come back as {"error", "code", "details"} with a status picked
from the error code. Report endpoints answer with a dismissible
{"warning", ...} payload instead, since a failed report never affects
stock.
"""

import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response

from assemblyman import workshop
from assemblyman.authentication import HasServiceCredentials, ServiceKeyAuthentication
from assemblyman.exceptions import AssemblyError
from assemblyman.models.assembly import Assembly
from assemblyman.models.bom import BOM
from assemblyman.models.item import Item
from assemblyman.serializers import (
    AssemblyCreateSerializer,
    AssemblyReverseSerializer,
    UnitSerialsUpdateSerializer,
)

logger = logging.getLogger('assemblyman')


NOT_FOUND_CODES = {
    'BOM_NOT_FOUND',
    'VENDOR_NOT_FOUND',
    'USER_NOT_FOUND',
    'ITEM_NOT_FOUND',
    'ASSEMBLY_NOT_FOUND',
    'UNIT_NOT_FOUND',
}


def status_for(exc: AssemblyError) -> int:
    if exc.code in NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if exc.code == 'INSUFFICIENT_QUANTITY':
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: AssemblyError) -> Response:
    return Response(
        {'error': exc.message, 'code': exc.code, 'details': exc.as_dict()['data']},
        status=status_for(exc),
    )


def invalid_request(errors) -> Response:
    return Response(
        {'error': 'Invalid request', 'code': 'INVALID_REQUEST', 'details': errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def unexpected_error(action: str) -> Response:
    logger.exception("api.unexpected_error", extra={"action": action})
    return Response(
        {'error': 'Unexpected error. No changes were made.', 'code': 'INTERNAL_ERROR', 'details': {}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def report_warning(report: str, exc: Exception) -> Response:
    """Logged, dismissible failure of a read-only report."""
    if isinstance(exc, AssemblyError):
        logger.warning("report.failed", extra={"report": report, "code": exc.code})
        body = {'warning': exc.message, 'code': exc.code, 'dismissible': True}
        return Response(body, status=status_for(exc))
    logger.exception("report.failed", extra={"report": report})
    body = {'warning': 'Report could not be generated', 'code': 'REPORT_FAILED', 'dismissible': True}
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def get_assembly(pk) -> Assembly:
    try:
        return Assembly.objects.select_related('bom', 'item').get(pk=pk)
    except Assembly.DoesNotExist:
        raise AssemblyError('ASSEMBLY_NOT_FOUND', assembly_id=pk) from None


# Assembly runs
@api_view(['POST'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def create_assembly(request):
    """Create an assembly run and consume its components"""
    serializer = AssemblyCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_request(serializer.errors)

    try:
        assembly = workshop.create(serializer.to_request())
    except AssemblyError as exc:
        return error_response(exc)
    except Exception:
        return unexpected_error('create_assembly')

    return Response(
        {
            'success': True,
            'assemblyId': assembly.pk,
            'message': f"Assembly '{assembly.name}' created with {assembly.quantity} units",
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def reverse_assembly(request):
    """Delete an assembly run and restore its stock"""
    serializer = AssemblyReverseSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_request(serializer.errors)

    reverse = serializer.to_request()
    try:
        workshop.reverse(reverse.assembly_id, reverse.user_id)
    except AssemblyError as exc:
        return error_response(exc)
    except Exception:
        return unexpected_error('reverse_assembly')

    return Response({
        'success': True,
        'assemblyId': reverse.assembly_id,
        'message': 'Assembly deleted and stock restored',
    })


@api_view(['POST'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def unit_serials(request, pk):
    """Record the serials of one produced unit"""
    serializer = UnitSerialsUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_request(serializer.errors)

    data = serializer.validated_data
    try:
        unit = workshop.set_unit_serials(
            pk,
            serial_number=data['serialNumber'],
            component_serials=dict(data['components']),
            user_id=data['userId'],
        )
    except AssemblyError as exc:
        return error_response(exc)
    except Exception:
        return unexpected_error('unit_serials')

    return Response({
        'success': True,
        'unitId': unit.pk,
        'serialNumber': unit.serial_number,
    })


# Vendor availability
@api_view(['GET'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def item_vendors(request, code):
    """Stock per vendor source for one item"""
    try:
        item = Item.objects.get(code=code)
    except Item.DoesNotExist:
        return error_response(AssemblyError('ITEM_NOT_FOUND', item=code))

    return Response({
        'itemId': item.code,
        'vendors': [stock.as_dict() for stock in workshop.vendor_stock(item)],
    })


@api_view(['GET'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def bom_sourcing(request, pk):
    """Qualifying vendor sources for every line of a BOM run"""
    try:
        bom = BOM.objects.get(pk=pk)
    except BOM.DoesNotExist:
        return error_response(AssemblyError('BOM_NOT_FOUND', bom_id=pk))

    try:
        sourcing = workshop.resolve(bom, request.query_params.get('quantity', '1'))
    except AssemblyError as exc:
        return error_response(exc)

    return Response({
        'bomId': bom.pk,
        'quantity': sourcing.quantity,
        'satisfiable': sourcing.is_satisfiable,
        'shortages': [line.component.code for line in sourcing.shortages],
        'lines': [
            {
                'lineId': line.line_id,
                'componentId': line.component.code,
                'componentName': line.component.label,
                'quantityPerUnit': str(line.quantity_per_unit),
                'required': str(line.required),
                'vendors': [stock.as_dict() for stock in line.vendors],
            }
            for line in sourcing.lines
        ],
    })


# Reports
@api_view(['GET'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def assembly_picklist(request, pk):
    """Printable pick list, one page per unit"""
    try:
        html = workshop.render_picklist(get_assembly(pk))
    except Exception as exc:
        return report_warning('picklist', exc)
    return HttpResponse(html, content_type='text/html; charset=utf-8')


@api_view(['GET'])
@authentication_classes([ServiceKeyAuthentication])
@permission_classes([HasServiceCredentials])
def assembly_usage(request, pk):
    """Traceability records of one run, as JSON or CSV"""
    try:
        assembly = get_assembly(pk)
        rows = workshop.usage_rows(assembly)
        if request.query_params.get('export') == 'csv':
            response = HttpResponse(workshop.usage_csv(rows), content_type='text/csv; charset=utf-8')
            response['Content-Disposition'] = f'attachment; filename="assembly-{assembly.pk}-usage.csv"'
            return response
        traces = workshop.unit_trace(assembly)
    except Exception as exc:
        return report_warning('usage', exc)

    return Response({
        'assemblyId': assembly.pk,
        'usages': [row.as_dict() for row in rows],
        'units': [
            {
                'unitId': trace.unit_id,
                'unitNumber': trace.unit_number,
                'serialNumber': trace.serial_number,
                'components': trace.components,
            }
            for trace in traces
        ],
    })

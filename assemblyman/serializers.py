"""
Request serializers for the HTTP API.

JSON bodies use camelCase keys; each serializer turns a validated body
into the request struct the workshop service expects.
"""

from rest_framework import serializers

from assemblyman.protocols.assembly import (
    AssemblyRequest,
    ComponentSource,
    ReverseRequest,
    UnitSerials,
)


class ComponentSourceSerializer(serializers.Serializer):
    componentId = serializers.CharField()
    vendorId = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class UnitSerialsSerializer(serializers.Serializer):
    unitNumber = serializers.IntegerField(min_value=1)
    serialNumber = serializers.CharField(required=False, allow_blank=True, default='')
    components = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField(allow_blank=True)),
        required=False,
        default=dict,
    )


class AssemblyCreateSerializer(serializers.Serializer):
    # Presence is checked by the service
    bomId = serializers.IntegerField(required=False, allow_null=True, default=None)
    assemblyName = serializers.CharField(required=False, allow_blank=True, default='')
    # Numeric-looking strings are accepted and parsed by the service
    quantity = serializers.CharField()
    userId = serializers.IntegerField(required=False, allow_null=True, default=None)
    componentSources = ComponentSourceSerializer(many=True, required=False, default=list)
    poNumber = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    serialNumbers = UnitSerialsSerializer(many=True, required=False, default=list)

    def to_request(self) -> AssemblyRequest:
        data = self.validated_data
        return AssemblyRequest(
            bom_id=data['bomId'],
            assembly_name=data['assemblyName'],
            quantity=data['quantity'],
            user_id=data['userId'],
            component_sources=tuple(
                ComponentSource(
                    component_id=source['componentId'],
                    vendor_id=source['vendorId'] or None,
                )
                for source in data['componentSources']
            ),
            po_number=data['poNumber'],
            serial_numbers=tuple(
                UnitSerials(
                    unit_number=entry['unitNumber'],
                    serial_number=entry['serialNumber'],
                    components=dict(entry['components']),
                )
                for entry in data['serialNumbers']
            ),
        )


class AssemblyReverseSerializer(serializers.Serializer):
    assemblyId = serializers.IntegerField()
    userId = serializers.IntegerField(required=False, allow_null=True, default=None)

    def to_request(self) -> ReverseRequest:
        return ReverseRequest(
            assembly_id=self.validated_data['assemblyId'],
            user_id=self.validated_data['userId'],
        )


class UnitSerialsUpdateSerializer(serializers.Serializer):
    serialNumber = serializers.CharField(required=False, allow_blank=True, default='')
    components = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField(allow_blank=True)),
        required=False,
        default=dict,
    )
    userId = serializers.IntegerField(required=False, allow_null=True, default=None)

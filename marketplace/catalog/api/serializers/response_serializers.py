"""
Response Serializers for API Documentation

Used only for OpenAPI schema generation.
"""

from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    """Generic error response"""

    detail = serializers.CharField(help_text="Error message")
    code = serializers.CharField(required=False, help_text="Machine-readable error code")


class SyncFailureSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    detail = serializers.CharField()


class SyncAllResponseSerializer(serializers.Serializer):
    """Per-product outcome of a bulk sync"""

    synced = serializers.ListField(child=serializers.CharField())
    failed = SyncFailureSerializer(many=True)

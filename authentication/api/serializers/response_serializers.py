"""
Response Serializers for API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

from marketplace.catalog.api.serializers import ProductSerializer
from marketplace.markets.api.serializers import MarketplaceSerializer

from .user_serializers import PublicUserSerializer, UserSerializer


class ErrorResponseSerializer(serializers.Serializer):
    """Generic error response"""

    detail = serializers.CharField(help_text="Error message")
    code = serializers.CharField(required=False, help_text="Machine-readable error code")


class WebhookAckSerializer(serializers.Serializer):
    """Acknowledgement returned to the identity provider"""

    received = serializers.BooleanField()


class DashboardResponseSerializer(serializers.Serializer):
    """Own account with products and marketplaces"""

    user = UserSerializer()
    products = ProductSerializer(many=True)
    marketplaces = MarketplaceSerializer(many=True)


class SellerPageResponseSerializer(serializers.Serializer):
    """Public seller page"""

    user = PublicUserSerializer()
    products = ProductSerializer(many=True)

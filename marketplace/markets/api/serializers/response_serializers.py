"""
Response Serializers for API Documentation

Used only for OpenAPI schema generation.
"""

from rest_framework import serializers

from marketplace.catalog.api.serializers import ProductSerializer

from .market_serializers import MarketplaceSerializer


class MarketplaceDetailResponseSerializer(serializers.Serializer):
    marketplace = MarketplaceSerializer()
    is_owner = serializers.BooleanField()
    is_member = serializers.BooleanField()
    products = ProductSerializer(many=True)


class MembershipResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()

"""
Response Serializers for API Documentation

Used for OpenAPI schema generation and for shaping purchase requests.
"""

from rest_framework import serializers

from payment_system.domain.models import PurchaseRequest


class ErrorResponseSerializer(serializers.Serializer):
    """Generic error response"""

    detail = serializers.CharField(help_text="Error message")
    code = serializers.CharField(required=False, help_text="Machine-readable error code")


class CheckoutSessionSummarySerializer(serializers.Serializer):
    seller_id = serializers.CharField()
    seller_slug = serializers.CharField(allow_null=True)
    session_id = serializers.CharField()
    url = serializers.URLField()
    subtotal = serializers.IntegerField()
    application_fee_amount = serializers.IntegerField()
    currency = serializers.CharField()


class CheckoutResponseSerializer(serializers.Serializer):
    payment_style = serializers.CharField()
    sessions = CheckoutSessionSummarySerializer(many=True)
    redirect_url = serializers.URLField(allow_null=True)
    purchase_requests = serializers.ListField(child=serializers.UUIDField())


class PurchaseRequestSerializer(serializers.ModelSerializer):
    buyer_id = serializers.CharField(read_only=True)
    seller_id = serializers.CharField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)
    price_id = serializers.UUIDField(read_only=True, allow_null=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    buyer_slug = serializers.CharField(source="buyer.slug", read_only=True, allow_null=True)
    seller_slug = serializers.CharField(source="seller.slug", read_only=True, allow_null=True)

    class Meta:
        model = PurchaseRequest
        fields = (
            "id",
            "buyer_id",
            "buyer_slug",
            "seller_id",
            "seller_slug",
            "product_id",
            "product_name",
            "price_id",
            "unit_amount",
            "currency",
            "quantity",
            "status",
            "checkout_session_id",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ApproveResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    checkout_url = serializers.URLField()
    request = PurchaseRequestSerializer()


class OnboardingUrlResponseSerializer(serializers.Serializer):
    url = serializers.URLField()


class InsightsSummarySerializer(serializers.Serializer):
    totalRevenue = serializers.CharField()
    averageCharge = serializers.CharField()
    transactions = serializers.IntegerField()
    lastTransaction = serializers.CharField()

from rest_framework import serializers

from marketplace.models import Price


class CheckoutItemSerializer(serializers.Serializer):
    """
    One cart line. Only the ids and quantity are used; the other fields mirror
    the client cart and are ignored in favour of server-side prices.
    """

    product_id = serializers.UUIDField()
    price_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    seller_id = serializers.CharField(required=False)
    payment_style = serializers.ChoiceField(choices=Price.PAYMENT_STYLE_CHOICES, required=False)
    unit_price = serializers.IntegerField(min_value=0, required=False)


class CheckoutRequestSerializer(serializers.Serializer):
    items = CheckoutItemSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("Cart is empty.")
        return value


class PurchaseRequestCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    price_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class ConnectRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, help_text="Account email (defaults to the user's email)")

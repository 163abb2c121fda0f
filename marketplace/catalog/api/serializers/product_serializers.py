from django.conf import settings
from rest_framework import serializers

from marketplace.catalog.domain.models.catalog import Price, Product


def default_currency():
    return getattr(settings, "DEFAULT_CURRENCY", "usd")


class PriceSpecSerializer(serializers.Serializer):
    """One price of a product write request. ``id`` is present for existing prices on update."""

    id = serializers.UUIDField(required=False, allow_null=True)
    unit_amount = serializers.IntegerField(min_value=1, help_text="Minor currency units (e.g. cents)")
    currency = serializers.CharField(min_length=3, max_length=3, default=default_currency)
    is_default = serializers.BooleanField(default=False)
    payment_style = serializers.ChoiceField(choices=Price.PAYMENT_STYLE_CHOICES, default=Price.INSTANT)
    allocated_quantity = serializers.IntegerField(min_value=0, default=0)
    marketplace_id = serializers.UUIDField(required=False, allow_null=True, default=None)

    def validate_currency(self, value):
        return value.lower()


class ProductWriteSerializer(serializers.Serializer):
    """Create/update payload. Validated before any business logic runs."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    images = serializers.ListField(child=serializers.URLField(max_length=2000), required=False, default=list)
    tag_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)
    prices = PriceSpecSerializer(many=True)

    def validate_prices(self, value):
        if not value:
            raise serializers.ValidationError("At least one price is required.")

        defaults = sum(1 for spec in value if spec["is_default"])
        if defaults != 1:
            raise serializers.ValidationError("Exactly one price must be marked as default.")

        scoped = [spec["marketplace_id"] for spec in value if spec.get("marketplace_id")]
        if len(scoped) != len(set(scoped)):
            raise serializers.ValidationError("Only one price per marketplace is allowed.")

        ids = [spec["id"] for spec in value if spec.get("id")]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("A price can only appear once.")

        return value


class SyncRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class PriceSerializer(serializers.ModelSerializer):
    marketplace_id = serializers.UUIDField(read_only=True, allow_null=True)
    is_synced = serializers.SerializerMethodField()

    class Meta:
        model = Price
        fields = (
            "id",
            "unit_amount",
            "currency",
            "is_default",
            "payment_style",
            "allocated_quantity",
            "marketplace_id",
            "stripe_price_id",
            "is_synced",
            "created_at",
        )
        read_only_fields = fields

    def get_is_synced(self, obj) -> bool:
        return not obj.is_placeholder


class ProductTagOptionSerializer(serializers.Serializer):
    """Tag as an option of the tag selector"""

    value = serializers.CharField()
    label = serializers.CharField()


class ProductSerializer(serializers.ModelSerializer):
    """Product with prices and tags."""

    seller_id = serializers.CharField(read_only=True)
    seller_slug = serializers.CharField(source="seller.slug", read_only=True, allow_null=True)
    is_synced = serializers.BooleanField(read_only=True)
    prices = serializers.SerializerMethodField()
    tags = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = (
            "id",
            "name",
            "description",
            "images",
            "seller_id",
            "seller_slug",
            "stripe_product_id",
            "total_quantity",
            "needs_sync",
            "is_synced",
            "prices",
            "tags",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_prices(self, obj):
        # Marketplace listings attach only the marketplace-scoped prices
        prices = getattr(obj, "marketplace_prices", None)
        if prices is None:
            prices = obj.prices.all()
        return PriceSerializer(prices, many=True).data

    def get_tags(self, obj):
        return [{"value": str(pt.tag.id), "label": pt.tag.name} for pt in obj.product_tags.all()]


class RecentProductSerializer(serializers.ModelSerializer):
    """Product card with its most recent price"""

    seller_id = serializers.CharField(read_only=True)
    latest_price = serializers.SerializerMethodField()
    tags = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ("id", "name", "description", "images", "seller_id", "latest_price", "tags", "created_at")
        read_only_fields = fields

    def get_latest_price(self, obj):
        return {
            "id": str(obj.latest_price_id),
            "unit_amount": obj.latest_unit_amount,
            "currency": obj.latest_currency,
            "payment_style": obj.latest_payment_style,
        }

    def get_tags(self, obj):
        return [pt.tag.name for pt in obj.product_tags.all()]

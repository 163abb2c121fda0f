from rest_framework import serializers

from marketplace.markets.domain.models.market import Marketplace


class MarketplaceSerializer(serializers.ModelSerializer):
    owner_ids = serializers.SerializerMethodField()
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Marketplace
        fields = ("id", "name", "slug", "description", "owner_ids", "member_count", "created_at")
        read_only_fields = fields

    def get_owner_ids(self, obj):
        return [owner.id for owner in obj.owners.all()]

    def get_member_count(self, obj) -> int:
        return len(obj.members.all())


class MarketplaceCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Marketplace name is required")
        return value.strip()

from rest_framework import serializers

from marketplace.catalog.domain.models.catalog import Tag


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ("id", "name", "created_by", "created_at")
        read_only_fields = fields


class TagCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    created_by = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

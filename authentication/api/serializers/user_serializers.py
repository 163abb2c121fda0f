from rest_framework import serializers

from authentication.domain.models import User


class UserSerializer(serializers.ModelSerializer):
    """Own account, as shown on the dashboard."""

    has_connected_account = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = ("id", "slug", "email", "first_name", "last_name", "role", "stripe_account_id", "has_connected_account")
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """Seller page header. Never exposes email or processor ids."""

    class Meta:
        model = User
        fields = ("id", "slug", "first_name", "last_name", "role")
        read_only_fields = fields

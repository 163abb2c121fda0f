from .response_serializers import (
    DashboardResponseSerializer,
    ErrorResponseSerializer,
    SellerPageResponseSerializer,
    WebhookAckSerializer,
)
from .user_serializers import PublicUserSerializer, UserSerializer


__all__ = [
    "UserSerializer",
    "PublicUserSerializer",
    "ErrorResponseSerializer",
    "WebhookAckSerializer",
    "DashboardResponseSerializer",
    "SellerPageResponseSerializer",
]

from .request_serializers import (
    CheckoutItemSerializer,
    CheckoutRequestSerializer,
    ConnectRequestSerializer,
    PurchaseRequestCreateSerializer,
)
from .response_serializers import (
    ApproveResponseSerializer,
    CheckoutResponseSerializer,
    ErrorResponseSerializer,
    InsightsSummarySerializer,
    OnboardingUrlResponseSerializer,
    PurchaseRequestSerializer,
)


__all__ = [
    "CheckoutItemSerializer",
    "CheckoutRequestSerializer",
    "PurchaseRequestCreateSerializer",
    "ConnectRequestSerializer",
    "CheckoutResponseSerializer",
    "PurchaseRequestSerializer",
    "ApproveResponseSerializer",
    "OnboardingUrlResponseSerializer",
    "InsightsSummarySerializer",
    "ErrorResponseSerializer",
]

from .product_serializers import (
    PriceSerializer,
    PriceSpecSerializer,
    ProductSerializer,
    ProductTagOptionSerializer,
    ProductWriteSerializer,
    RecentProductSerializer,
    SyncRequestSerializer,
)
from .response_serializers import ErrorResponseSerializer, SyncAllResponseSerializer
from .tag_serializers import TagCreateSerializer, TagSerializer


__all__ = [
    "PriceSpecSerializer",
    "ProductWriteSerializer",
    "SyncRequestSerializer",
    "PriceSerializer",
    "ProductSerializer",
    "ProductTagOptionSerializer",
    "RecentProductSerializer",
    "TagSerializer",
    "TagCreateSerializer",
    "ErrorResponseSerializer",
    "SyncAllResponseSerializer",
]

from .market_serializers import MarketplaceCreateSerializer, MarketplaceSerializer
from .response_serializers import MarketplaceDetailResponseSerializer, MembershipResponseSerializer


__all__ = [
    "MarketplaceSerializer",
    "MarketplaceCreateSerializer",
    "MarketplaceDetailResponseSerializer",
    "MembershipResponseSerializer",
]

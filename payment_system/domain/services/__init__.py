"""
Payment System Domain Services

- CheckoutService: Cart checkout (sessions per seller or purchase requests)
- PurchaseRequestService: Approval-gated purchases
- ConnectService: Seller connected accounts and insights
"""

from .checkout_service import CheckoutService, platform_fee
from .connect_service import ConnectService
from .purchase_request_service import PurchaseRequestService


__all__ = [
    "CheckoutService",
    "PurchaseRequestService",
    "ConnectService",
    "platform_fee",
]

from .checkout_views import checkout
from .connect_views import connect, disconnect, insights_summary, onboarding_link
from .purchase_request_views import approve_purchase_request, purchase_requests, reject_purchase_request


__all__ = [
    "checkout",
    "purchase_requests",
    "approve_purchase_request",
    "reject_purchase_request",
    "connect",
    "onboarding_link",
    "disconnect",
    "insights_summary",
]

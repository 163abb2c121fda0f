"""
Payments
========

Payment processor interface, its Stripe implementation and the factory that
picks one from settings. Remote objects live on sellers' connected accounts.
"""

from .factory import PaymentFactory
from .interface import (
    Charge,
    CheckoutSession,
    ConnectedAccount,
    PaymentException,
    PaymentProviderInterface,
    PaymentStatus,
    RemotePrice,
    RemoteProduct,
)
from .stripe_provider import StripeProvider

__all__ = [
    "PaymentProviderInterface",
    "CheckoutSession",
    "ConnectedAccount",
    "RemoteProduct",
    "RemotePrice",
    "Charge",
    "PaymentStatus",
    "PaymentException",
    "StripeProvider",
    "PaymentFactory",
]

"""
Builds the payment provider named in ``settings.INFRASTRUCTURE``.
"""

import logging
from typing import Literal, Optional

from django.conf import settings

from .interface import PaymentProviderInterface
from .stripe_provider import StripeProvider

logger = logging.getLogger(__name__)

PaymentBackend = Literal["stripe"]


class PaymentFactory:
    """
    Maps a provider name to its adapter.

    ``INFRASTRUCTURE = {"PAYMENT_PROVIDER": "stripe"}`` in settings selects
    the default; tests bypass the factory and hand a fake to the container.
    """

    @staticmethod
    def create(backend: Optional[PaymentBackend] = None) -> PaymentProviderInterface:
        """
        Args:
            backend: Provider name, overriding settings when given

        Raises:
            ValueError: Unknown provider name
        """
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("PAYMENT_PROVIDER", "stripe")

        logger.info(f"Creating payment provider: {backend_type}")

        if backend_type == "stripe":
            return StripeProvider()
        raise ValueError(f"Unsupported payment provider '{backend_type}'")

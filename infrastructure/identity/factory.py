"""
Identity Provider Factory
==========================

Creates the identity provider configured in settings.
"""

import logging
from typing import Literal, Optional

from django.conf import settings

from .clerk_provider import ClerkProvider
from .interface import IdentityProviderInterface

logger = logging.getLogger(__name__)

IdentityBackend = Literal["clerk"]


class IdentityFactory:
    """Factory for creating identity provider instances."""

    @staticmethod
    def create(backend: Optional[IdentityBackend] = None) -> IdentityProviderInterface:
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("IDENTITY_PROVIDER", "clerk")

        logger.info(f"Creating identity provider: {backend_type}")

        if backend_type == "clerk":
            return ClerkProvider()
        raise ValueError(f"Invalid identity provider: {backend_type}. Currently only 'clerk' is supported")

"""
Identity Provider Abstraction Layer
====================================

User directory lookups and lifecycle webhook verification.
"""

from .clerk_provider import ClerkProvider
from .factory import IdentityFactory
from .interface import IdentityEvent, IdentityException, IdentityProviderInterface, IdentityUser

__all__ = [
    "IdentityProviderInterface",
    "IdentityUser",
    "IdentityEvent",
    "IdentityException",
    "ClerkProvider",
    "IdentityFactory",
]

"""
Identity Provider Interface
============================

Abstract contract for the external service that owns user accounts:
looking up user details and verifying its signed lifecycle webhooks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass
class IdentityUser:
    """
    User record as known by the identity provider.

    Attributes:
        user_id: Provider user id (also the local primary key)
        email: Primary email address, if any
        first_name: Given name
        last_name: Family name
        image_url: Avatar URL
    """

    user_id: str
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    image_url: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or "Anonymous"


@dataclass
class IdentityEvent:
    """Verified webhook event from the identity provider."""

    event_type: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def user_id(self) -> Optional[str]:
        return self.data.get("id")


class IdentityProviderInterface(ABC):
    """
    Abstract interface for identity provider operations.

    Concrete implementations:
        - ClerkProvider: Clerk REST API + Svix-signed webhooks
    """

    @abstractmethod
    def get_user(self, user_id: str) -> IdentityUser:
        """
        Fetch a user from the provider.

        Raises:
            IdentityException: If the user cannot be fetched
        """
        pass

    @abstractmethod
    def verify_webhook(self, payload: bytes, headers: Mapping[str, str]) -> IdentityEvent:
        """
        Verify a webhook signature and parse the event.

        Raises:
            IdentityException: If verification fails
        """
        pass


class IdentityException(Exception):
    """Base exception for identity provider operations."""

    pass

"""
Payment Provider Interface
===========================

Abstract base class defining the contract for payment operations.

Every operation that touches a seller's sub-account takes the connected
account id as an explicit argument. Omitting it would run the call against
the platform account instead.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


@dataclass
class ConnectedAccount:
    """
    A seller sub-account in the payment processor.

    Attributes:
        account_id: Processor account identifier
        onboarding_url: Link the seller follows to finish onboarding
    """

    account_id: str
    onboarding_url: str


@dataclass
class RemoteProduct:
    """Remote product object living in a connected account."""

    product_id: str
    name: str
    active: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RemotePrice:
    """
    Remote price object living in a connected account.

    Remote prices are immutable in amount: changing an amount means creating a
    new price and deactivating the old one.
    """

    price_id: str
    product_id: str
    unit_amount: int
    currency: str
    active: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CheckoutSession:
    """
    Represents a payment checkout session.

    Attributes:
        session_id: Unique session identifier
        url: Redirect URL for customer to complete payment
        amount: Payment amount in smallest currency unit (cents)
        currency: ISO currency code (e.g., 'usd')
        status: Current status of the session
        destination_account: Connected account receiving the funds
        application_fee_amount: Platform fee withheld, in smallest currency unit
        metadata: Additional custom data
    """

    session_id: str
    url: str
    amount: int
    currency: str
    status: PaymentStatus
    destination_account: str
    application_fee_amount: int
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Charge:
    """A charge collected on a connected account."""

    charge_id: str
    amount: int
    currency: str
    created: int


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment provider operations.

    Concrete implementations:
        - StripeProvider: Stripe Connect (standard accounts, direct charges)
    """

    @abstractmethod
    def create_connected_account(self, email: str, refresh_url: str, return_url: str) -> ConnectedAccount:
        """
        Create a seller sub-account and an onboarding link for it.

        Raises:
            PaymentException: If account or link creation fails
        """
        pass

    @abstractmethod
    def create_onboarding_link(self, account_id: str, refresh_url: str, return_url: str) -> str:
        """Issue a fresh onboarding link for an existing connected account."""
        pass

    @abstractmethod
    def create_product(
        self,
        account_id: str,
        name: str,
        description: str = "",
        images: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RemoteProduct:
        """Create a remote product in the connected account."""
        pass

    @abstractmethod
    def update_product(self, account_id: str, product_id: str, **fields) -> RemoteProduct:
        """Update mutable fields (name, description, images, metadata, active) of a remote product."""
        pass

    @abstractmethod
    def find_product_by_local_id(self, account_id: str, local_product_id: str) -> Optional[RemoteProduct]:
        """Look up a remote product whose metadata points at the given local product id."""
        pass

    @abstractmethod
    def delete_product(self, account_id: str, product_id: str) -> bool:
        """
        Remove a remote product.

        Returns:
            True if deleted, False if it had to be archived instead
        """
        pass

    @abstractmethod
    def create_price(
        self,
        account_id: str,
        product_id: str,
        unit_amount: int,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RemotePrice:
        """Create a remote price for a remote product."""
        pass

    @abstractmethod
    def update_price(self, account_id: str, price_id: str, metadata: Dict[str, Any]) -> RemotePrice:
        """Update the metadata of a remote price (amount is immutable)."""
        pass

    @abstractmethod
    def deactivate_price(self, account_id: str, price_id: str) -> None:
        """Deactivate a remote price. Remote prices are never deleted."""
        pass

    @abstractmethod
    def list_prices(self, account_id: str, product_id: str) -> List[RemotePrice]:
        """Active remote prices of a remote product."""
        pass

    @abstractmethod
    def create_checkout_session(
        self,
        account_id: str,
        line_items: List[Dict[str, Any]],
        customer_email: str,
        application_fee_amount: int,
        currency: str,
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> CheckoutSession:
        """
        Create a checkout session on the seller's connected account.

        The platform fee is withheld and the remainder is paid to the account.

        Raises:
            PaymentException: If session creation fails
        """
        pass

    @abstractmethod
    def expire_checkout_session(self, account_id: str, session_id: str) -> None:
        """Expire an open checkout session so it can no longer be paid."""
        pass

    @abstractmethod
    def list_charges(self, account_id: str, limit: int = 5) -> List[Charge]:
        """List the most recent charges of a connected account."""
        pass


class PaymentException(Exception):
    """Base exception for payment operations."""

    pass

"""
Service container
=================

Holds the process-wide payment and identity providers and the domain
services built on top of them. Services receive their providers through
their constructors; nothing below the views reaches back into the container.

Usage:
    from infrastructure.container import container

    result = container.checkout_service().checkout(user, items)
"""

import logging
from typing import Optional

from .identity import IdentityFactory, IdentityProviderInterface
from .payments import PaymentFactory, PaymentProviderInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Lazily builds and caches providers and the services that use them.

    Services are built on first access and share the cached providers.
    Singleton: every ``ServiceContainer()`` call returns the same object.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Return the shared instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Set up empty caches on first construction."""
        if not self._initialized:
            self._payment: Optional[PaymentProviderInterface] = None
            self._identity: Optional[IdentityProviderInterface] = None

            # Domain Services
            self._catalog_service = None
            self._sync_service = None
            self._marketplace_service = None
            self._tag_service = None
            self._listing_service = None
            self._checkout_service = None
            self._purchase_request_service = None
            self._connect_service = None
            self._user_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        """
        Payment processor adapter.

        Args:
            backend: Provider name ('stripe'); rebuilds the cached adapter
                    when given, otherwise settings.INFRASTRUCTURE decides

        Returns:
            PaymentProviderInterface implementation (cached)
        """
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment provider: {type(self._payment).__name__}")

        return self._payment

    def identity(self, backend: Optional[str] = None) -> IdentityProviderInterface:
        """
        Identity provider adapter.

        Args:
            backend: Provider name ('clerk'); rebuilds the cached adapter
                    when given, otherwise settings.INFRASTRUCTURE decides

        Returns:
            IdentityProviderInterface implementation (cached)
        """
        if self._identity is None or backend is not None:
            self._identity = IdentityFactory.create(backend)
            logger.debug(f"Created identity provider: {type(self._identity).__name__}")

        return self._identity

    def user_service(self):
        """Get UserService instance."""
        if self._user_service is None:
            from authentication.domain.services import UserService

            self._user_service = UserService(identity=self.identity())
            logger.debug("Created UserService")
        return self._user_service

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.services import CatalogService

            self._catalog_service = CatalogService(payment=self.payment())
            logger.debug("Created CatalogService")
        return self._catalog_service

    def sync_service(self):
        """Get SyncService instance."""
        if self._sync_service is None:
            from marketplace.services import SyncService

            self._sync_service = SyncService(payment=self.payment())
            logger.debug("Created SyncService")
        return self._sync_service

    def marketplace_service(self):
        """Get MarketplaceService instance."""
        if self._marketplace_service is None:
            from marketplace.services import MarketplaceService

            self._marketplace_service = MarketplaceService()
            logger.debug("Created MarketplaceService")
        return self._marketplace_service

    def tag_service(self):
        """Get TagService instance."""
        if self._tag_service is None:
            from marketplace.services import TagService

            self._tag_service = TagService()
            logger.debug("Created TagService")
        return self._tag_service

    def listing_service(self):
        """Get ListingService instance."""
        if self._listing_service is None:
            from marketplace.services import ListingService

            self._listing_service = ListingService()
            logger.debug("Created ListingService")
        return self._listing_service

    def checkout_service(self):
        """Get CheckoutService instance."""
        if self._checkout_service is None:
            from payment_system.domain.services import CheckoutService

            # CheckoutService resolves buyer emails and creates purchase requests for REQUEST carts
            self._checkout_service = CheckoutService(
                payment=self.payment(),
                user_service=self.user_service(),
                purchase_request_service=self.purchase_request_service(),
            )
            logger.debug("Created CheckoutService")
        return self._checkout_service

    def purchase_request_service(self):
        """Get PurchaseRequestService instance."""
        if self._purchase_request_service is None:
            from payment_system.domain.services import PurchaseRequestService

            self._purchase_request_service = PurchaseRequestService(
                payment=self.payment(), user_service=self.user_service()
            )
            logger.debug("Created PurchaseRequestService")
        return self._purchase_request_service

    def connect_service(self):
        """Get ConnectService instance."""
        if self._connect_service is None:
            from payment_system.domain.services import ConnectService

            self._connect_service = ConnectService(payment=self.payment())
            logger.debug("Created ConnectService")
        return self._connect_service

    def reset(self):
        """
        Drop every cached provider and service.

        The next access rebuilds them from settings.
        """
        self._payment = None
        self._identity = None
        self._catalog_service = None
        self._sync_service = None
        self._marketplace_service = None
        self._tag_service = None
        self._listing_service = None
        self._checkout_service = None
        self._purchase_request_service = None
        self._connect_service = None
        self._user_service = None
        logger.info("Service container reset")

    def configure_for_testing(self, payment: PaymentProviderInterface, identity: IdentityProviderInterface):
        """
        Configure container with in-memory providers for testing.

        Services built afterwards receive the given providers.
        """
        self.reset()
        self._payment = payment
        self._identity = identity
        logger.info("Service container configured for testing")


container = ServiceContainer()


def get_payment() -> PaymentProviderInterface:
    """Payment provider of the shared container."""
    return container.payment()


def get_identity() -> IdentityProviderInterface:
    """Identity provider of the shared container."""
    return container.identity()

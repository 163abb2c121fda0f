"""
SyncService - manual reconciliation ("force sync")

Brings products created before the seller connected a payment account, or
flagged ``needs_sync`` after a swallowed remote failure, back in line with
the connected account. Remote errors are returned to the caller; retrying is
a user action.
"""

from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Q

from authentication.domain.models import User
from infrastructure.payments import PaymentException, PaymentProviderInterface
from marketplace.models import PLACEHOLDER_PRICE_ID, Product
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .catalog_service import RemoteCatalogMixin


class SyncService(RemoteCatalogMixin, BaseService):
    """
    Service for force-syncing products to the seller's connected account.

    Idempotent: the remote product is looked up by ``localProductId``
    metadata before anything is created, and only placeholder prices get
    new remote prices.
    """

    def __init__(self, payment: PaymentProviderInterface):
        super().__init__()
        self.payment = payment

    @BaseService.log_performance
    def force_sync(
        self,
        seller: User,
        product_id,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ServiceResult[Product]:
        """
        Sync one product.

        Args:
            seller: Caller; must own the product and have a connected account
            product_id: Local product id
            name: Optional new name (applied locally and remotely)
            description: Optional new description

        Returns:
            ServiceResult with the synced Product
        """
        if not seller.stripe_account_id:
            return service_err(ErrorCodes.STRIPE_ACCOUNT_REQUIRED, "Stripe account not connected")

        product = Product.objects.filter(id=product_id).first()
        if product is None:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        if product.seller_id != seller.id:
            return service_err(ErrorCodes.NOT_PRODUCT_OWNER, "You can only sync your own products")

        return self._sync(seller.stripe_account_id, product, name, description)

    @BaseService.log_performance
    def sync_all(self, seller: User) -> ServiceResult[Dict[str, Any]]:
        """
        Sync every product of the seller that is not fully synced.

        Returns:
            ServiceResult with ``synced`` (product ids) and ``failed``
            (product id and error detail) lists
        """
        if not seller.stripe_account_id:
            return service_err(ErrorCodes.STRIPE_ACCOUNT_REQUIRED, "Stripe account not connected")

        synced: List[str] = []
        failed: List[Dict[str, str]] = []
        for product in self.unsynced_products(seller):
            result = self._sync(seller.stripe_account_id, product, None, None)
            if result.ok:
                synced.append(str(product.id))
            else:
                failed.append({"product_id": str(product.id), "detail": result.error_detail})

        self.logger.info(f"sync_all for {seller.id}: {len(synced)} synced, {len(failed)} failed")
        return service_ok({"synced": synced, "failed": failed})

    def unsynced_products(self, seller: User):
        return (
            Product.objects.filter(seller=seller)
            .filter(
                Q(stripe_product_id__isnull=True)
                | Q(needs_sync=True)
                | Q(prices__stripe_price_id=PLACEHOLDER_PRICE_ID)
            )
            .distinct()
            .order_by("created_at")
        )

    def _sync(self, account_id: str, product: Product, name, description) -> ServiceResult[Product]:
        name = name or product.name
        description = product.description if description is None else description

        remote_product_id = None
        created_prices = {}
        try:
            remote_product_id = self._ensure_remote_product(account_id, product, name, description, product.images)
            for price in product.prices.filter(stripe_price_id=PLACEHOLDER_PRICE_ID):
                created_prices[price.id] = self.payment.create_price(
                    account_id,
                    remote_product_id,
                    unit_amount=price.unit_amount,
                    currency=price.currency,
                    metadata=self._price_metadata(product.id, self._price_spec(price)),
                ).price_id
            retired = self._reconcile_remote_prices(account_id, remote_product_id, product, created_prices)
        except PaymentException as e:
            self.logger.warning(f"Force sync failed for product {product.id}: {str(e)}")
            # Keep partial progress so the next attempt does not create duplicates
            if remote_product_id:
                self._record(product, remote_product_id, created_prices, needs_sync=True)
            return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Sync failed: {str(e)}")

        product.name = name
        product.description = description
        self._record(product, remote_product_id, created_prices, needs_sync=False)

        self.logger.info(
            f"Synced product {product.id} -> {remote_product_id} "
            f"({len(created_prices)} new price(s), {retired} retired)"
        )
        return service_ok(product)

    def _reconcile_remote_prices(
        self, account_id: str, remote_product_id: str, product: Product, created_prices: Dict
    ) -> int:
        """
        Make the remote product's active prices match the local ones.

        Active remote prices no local row points at are deactivated, and the
        metadata of the ones still in use is pushed again. Returns the number
        of deactivated prices.

        Raises:
            PaymentException: If any remote call fails
        """
        held = {
            price.stripe_price_id: price
            for price in product.prices.exclude(stripe_price_id=PLACEHOLDER_PRICE_ID)
        }
        fresh = set(created_prices.values())

        retired = 0
        for remote_price in self.payment.list_prices(account_id, remote_product_id):
            if remote_price.price_id in fresh:
                continue
            price = held.get(remote_price.price_id)
            if price is None:
                self.payment.deactivate_price(account_id, remote_price.price_id)
                retired += 1
            else:
                self.payment.update_price(
                    account_id, remote_price.price_id, self._price_metadata(product.id, self._price_spec(price))
                )
        return retired

    def _record(self, product: Product, remote_product_id: str, created_prices: Dict, needs_sync: bool) -> None:
        with transaction.atomic():
            product.stripe_product_id = remote_product_id
            product.needs_sync = needs_sync
            product.save(update_fields=["name", "description", "stripe_product_id", "needs_sync", "updated_at"])
            for price in product.prices.filter(id__in=created_prices.keys()):
                price.stripe_price_id = created_prices[price.id]
                price.save(update_fields=["stripe_price_id", "updated_at"])

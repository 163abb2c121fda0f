"""
CatalogService - product CRUD with remote reconciliation

Keeps local Product/Price rows consistent with their remote counterparts in
the seller's connected account.

Creation is remote-first: remote product and prices are created before any
local row is written, and a local failure triggers a compensating delete of
the remote product. Updates and deletes treat local state as the source of
truth: remote failures are logged, swallowed, and surface as ``needs_sync``.
"""

import uuid
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from authentication.domain.models import User
from infrastructure.payments import PaymentException, PaymentProviderInterface
from infrastructure.payments.stripe_provider import LOCAL_PRODUCT_METADATA_KEY
from marketplace.models import PLACEHOLDER_PRICE_ID, Marketplace, Price, Product, ProductTag, Tag
from utils.logging_utils import mask_value
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

COMPENSATION_ATTEMPTS = 3


class RemoteCatalogMixin:
    """Remote product/price helpers shared by catalog and sync services."""

    payment: PaymentProviderInterface

    def _product_metadata(self, product_id) -> Dict[str, str]:
        return {LOCAL_PRODUCT_METADATA_KEY: str(product_id)}

    def _price_metadata(self, product_id, spec: Dict[str, Any]) -> Dict[str, str]:
        # Stripe metadata values are strings
        return {
            LOCAL_PRODUCT_METADATA_KEY: str(product_id),
            "paymentStyle": spec["payment_style"],
            "isDefault": "true" if spec["is_default"] else "false",
            "allocatedQuantity": str(spec["allocated_quantity"]),
            "marketplaceId": str(spec["marketplace_id"]) if spec.get("marketplace_id") else "",
        }

    def _price_spec(self, price: Price) -> Dict[str, Any]:
        return {
            "unit_amount": price.unit_amount,
            "currency": price.currency,
            "is_default": price.is_default,
            "payment_style": price.payment_style,
            "allocated_quantity": price.allocated_quantity,
            "marketplace_id": price.marketplace_id,
        }

    def _ensure_remote_product(
        self,
        account_id: str,
        product: Product,
        name: str,
        description: str,
        images: Optional[List[str]] = None,
    ) -> str:
        """
        Return the remote product id for ``product``, creating the remote product if needed.

        A recorded id is updated in place. Otherwise the connected account is
        searched by ``localProductId`` metadata before creating, so repeated
        calls never create duplicates.

        Raises:
            PaymentException: If any remote call fails
        """
        if product.stripe_product_id:
            self.payment.update_product(
                account_id, product.stripe_product_id, name=name, description=description, images=images
            )
            return product.stripe_product_id

        existing = self.payment.find_product_by_local_id(account_id, str(product.id))
        if existing is not None:
            self.payment.update_product(
                account_id, existing.product_id, name=name, description=description, images=images, active=True
            )
            return existing.product_id

        remote_product = self.payment.create_product(
            account_id,
            name=name,
            description=description,
            images=images,
            metadata=self._product_metadata(product.id),
        )
        return remote_product.product_id


class CatalogService(RemoteCatalogMixin, BaseService):
    """
    Service for product create/update/delete.

    Responsibilities:
    - Validate marketplace scope and tags before any remote call
    - Create remote product/prices before local rows (compensate on failure)
    - Reconcile price changes (immutable remote amounts) on update
    - Deactivate remote prices and archive remote products on delete
    - Keep ``total_quantity`` equal to the sum of allocated quantities
    """

    def __init__(self, payment: PaymentProviderInterface):
        super().__init__()
        self.payment = payment

    # ----- Queries -----

    @BaseService.log_performance
    def get_product(self, seller: User, product_id) -> ServiceResult[Product]:
        """Owner view of a product with its prices and tags."""
        result = self._get_owned_product(seller, product_id)
        if result.ok:
            return service_ok(self._reload(result.value.id))
        return result

    # ----- Commands -----

    @BaseService.log_performance
    def create_product(self, seller: User, data: Dict[str, Any]) -> ServiceResult[Product]:
        """
        Create a product with its prices.

        Args:
            seller: Product owner
            data: Payload validated by ProductWriteSerializer

        Returns:
            ServiceResult with the created Product. No local row exists when
            the result is a failure.
        """
        specs = data["prices"]

        check = self._check_marketplaces(seller, specs)
        if not check.ok:
            return check
        marketplaces = check.value

        tag_check = self._check_tags(data.get("tag_ids") or [])
        if not tag_check.ok:
            return tag_check
        tags = tag_check.value

        product_id = uuid.uuid4()
        account_id = seller.stripe_account_id
        remote_product_id = None
        remote_price_ids = [PLACEHOLDER_PRICE_ID] * len(specs)

        if account_id:
            try:
                remote_product = self.payment.create_product(
                    account_id,
                    name=data["name"],
                    description=data.get("description", ""),
                    images=data.get("images") or [],
                    metadata=self._product_metadata(product_id),
                )
            except PaymentException as e:
                return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Failed to create remote product: {str(e)}")

            remote_product_id = remote_product.product_id
            try:
                remote_price_ids = [
                    self.payment.create_price(
                        account_id,
                        remote_product_id,
                        unit_amount=spec["unit_amount"],
                        currency=spec["currency"],
                        metadata=self._price_metadata(product_id, spec),
                    ).price_id
                    for spec in specs
                ]
            except PaymentException as e:
                self._compensate(account_id, remote_product_id)
                return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Failed to create remote price: {str(e)}")

        try:
            with transaction.atomic():
                product = Product.objects.create(
                    id=product_id,
                    name=data["name"],
                    description=data.get("description", ""),
                    images=data.get("images") or [],
                    seller=seller,
                    stripe_product_id=remote_product_id,
                )
                for spec, remote_price_id in zip(specs, remote_price_ids):
                    self._create_price_row(product, spec, remote_price_id, marketplaces)
                ProductTag.objects.bulk_create([ProductTag(product=product, tag=tag) for tag in tags])

                product.recompute_total_quantity()
                product.save(update_fields=["total_quantity"])
        except DatabaseError as e:
            self.logger.error(f"Local persistence failed for product {product_id}: {str(e)}", exc_info=True)
            if remote_product_id:
                self._compensate(account_id, remote_product_id)
            return service_err(ErrorCodes.DATABASE_ERROR, "Failed to save product")

        self.logger.info(
            f"Created product {product_id} for {seller.id} "
            f"({'synced' if remote_product_id else 'placeholder prices'}, {len(specs)} price(s))"
        )
        return service_ok(self._reload(product_id))

    @BaseService.log_performance
    def update_product(self, seller: User, product_id, data: Dict[str, Any]) -> ServiceResult[Product]:
        """
        Update a product and reconcile its price set.

        All remote calls run before the local transaction. Remote failures are
        swallowed: affected prices fall back to the placeholder and the product
        is flagged ``needs_sync``.
        """
        owned = self._get_owned_product(seller, product_id)
        if not owned.ok:
            return owned
        product = owned.value

        specs = data["prices"]

        check = self._check_marketplaces(seller, specs)
        if not check.ok:
            return check
        marketplaces = check.value

        tag_check = self._check_tags(data.get("tag_ids") or [])
        if not tag_check.ok:
            return tag_check
        tags = tag_check.value

        existing = {str(price.id): price for price in product.prices.all()}
        incoming_ids = set()
        for spec in specs:
            if spec.get("id") is None:
                continue
            price_id = str(spec["id"])
            if price_id not in existing:
                return service_err(ErrorCodes.PRICE_NOT_FOUND, f"Price {price_id} does not belong to this product")
            incoming_ids.add(price_id)

        account_id = seller.stripe_account_id
        drift = False
        remote_product_id = product.stripe_product_id

        if account_id:
            try:
                remote_product_id = self._ensure_remote_product(
                    account_id, product, data["name"], data.get("description", ""), data.get("images") or []
                )
            except PaymentException as e:
                self.logger.warning(f"Remote product update failed for {product.id}: {str(e)}")
                drift = True

        synced = bool(account_id and remote_product_id)

        # (spec, existing price or None, remote price id to store)
        plan = []
        for spec in specs:
            price = existing.get(str(spec["id"])) if spec.get("id") is not None else None
            remote_price_id, failed = self._reconcile_price(account_id, synced, remote_product_id, product, price, spec)
            drift = drift or failed
            plan.append((spec, price, remote_price_id))

        removed = [price for price_id, price in existing.items() if price_id not in incoming_ids]
        for price in removed:
            if account_id and not price.is_placeholder:
                drift = self._deactivate_remote_price(account_id, price.stripe_price_id) or drift

        if synced and any(remote_price_id == PLACEHOLDER_PRICE_ID for _, _, remote_price_id in plan):
            drift = True

        try:
            with transaction.atomic():
                product.name = data["name"]
                product.description = data.get("description", "")
                product.images = data.get("images") or []
                product.stripe_product_id = remote_product_id
                product.needs_sync = drift if account_id else product.needs_sync
                product.save()

                for price in removed:
                    price.delete()

                for spec, price, remote_price_id in plan:
                    if price is None:
                        self._create_price_row(product, spec, remote_price_id, marketplaces)
                    else:
                        self._apply_spec(price, spec, remote_price_id, marketplaces)

                product.product_tags.exclude(tag__in=tags).delete()
                existing_tag_ids = set(product.product_tags.values_list("tag_id", flat=True))
                ProductTag.objects.bulk_create(
                    [ProductTag(product=product, tag=tag) for tag in tags if tag.id not in existing_tag_ids]
                )

                product.recompute_total_quantity()
                product.save(update_fields=["total_quantity"])
        except DatabaseError as e:
            self.logger.error(f"Local update failed for product {product.id}: {str(e)}", exc_info=True)
            return service_err(ErrorCodes.DATABASE_ERROR, "Failed to update product")

        if drift:
            self.logger.warning(f"Product {product.id} updated locally but not fully synced; flagged needs_sync")
        return service_ok(self._reload(product.id))

    @BaseService.log_performance
    def delete_product(self, seller: User, product_id) -> ServiceResult[None]:
        """Delete a product, deactivating remote prices and archiving the remote product first."""
        owned = self._get_owned_product(seller, product_id)
        if not owned.ok:
            return owned
        product = owned.value

        account_id = seller.stripe_account_id
        if account_id:
            for price in product.prices.all():
                if not price.is_placeholder:
                    self._deactivate_remote_price(account_id, price.stripe_price_id)
            if product.stripe_product_id:
                try:
                    self.payment.delete_product(account_id, product.stripe_product_id)
                except PaymentException as e:
                    self.logger.warning(f"Failed to remove remote product {product.stripe_product_id}: {str(e)}")

        product.delete()
        self.logger.info(f"Deleted product {product_id} for {seller.id}")
        return service_ok(None)

    # ----- Helpers -----

    def _reconcile_price(self, account_id, synced, remote_product_id, product, price, spec):
        """
        Decide the remote price id for one incoming price specification.

        Returns:
            (remote price id to store, whether a remote call failed)
        """
        if price is None:
            if not synced:
                return PLACEHOLDER_PRICE_ID, False
            return self._create_remote_price(account_id, remote_product_id, product, spec)

        amount_changed = price.unit_amount != spec["unit_amount"] or price.currency != spec["currency"]

        if not amount_changed:
            if not synced:
                return price.stripe_price_id, False
            if price.is_placeholder:
                return self._create_remote_price(account_id, remote_product_id, product, spec)
            try:
                self.payment.update_price(account_id, price.stripe_price_id, self._price_metadata(product.id, spec))
            except PaymentException as e:
                self.logger.warning(f"Remote price metadata update failed for {price.id}: {str(e)}")
                return price.stripe_price_id, True
            return price.stripe_price_id, False

        # Remote amounts are immutable: new remote price, old one deactivated
        if not synced:
            return PLACEHOLDER_PRICE_ID, False

        new_remote_id, failed = self._create_remote_price(account_id, remote_product_id, product, spec)
        if not price.is_placeholder:
            failed = self._deactivate_remote_price(account_id, price.stripe_price_id) or failed
        return new_remote_id, failed

    def _create_remote_price(self, account_id, remote_product_id, product, spec):
        try:
            remote_price = self.payment.create_price(
                account_id,
                remote_product_id,
                unit_amount=spec["unit_amount"],
                currency=spec["currency"],
                metadata=self._price_metadata(product.id, spec),
            )
        except PaymentException as e:
            self.logger.warning(f"Remote price creation failed for product {product.id}: {str(e)}")
            return PLACEHOLDER_PRICE_ID, True
        return remote_price.price_id, False

    def _deactivate_remote_price(self, account_id: str, remote_price_id: str) -> bool:
        """Deactivate a remote price. Returns True if the call failed."""
        try:
            self.payment.deactivate_price(account_id, remote_price_id)
        except PaymentException as e:
            self.logger.warning(f"Failed to deactivate remote price {remote_price_id}: {str(e)}")
            return True
        return False

    @retry(
        stop=stop_after_attempt(COMPENSATION_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(PaymentException),
        reraise=True,
    )
    def _delete_remote_product(self, account_id: str, remote_product_id: str) -> bool:
        return self.payment.delete_product(account_id, remote_product_id)

    def _compensate(self, account_id: str, remote_product_id: str) -> None:
        """Undo a remote product creation whose local counterpart was never written."""
        try:
            deleted = self._delete_remote_product(account_id, remote_product_id)
        except PaymentException as e:
            self.logger.error(
                f"Orphaned remote object: product {remote_product_id} on account {mask_value(account_id)} "
                f"could not be removed after {COMPENSATION_ATTEMPTS} attempts: {str(e)}"
            )
            return
        self.logger.info(f"Compensated remote product {remote_product_id} ({'deleted' if deleted else 'archived'})")

    def _get_owned_product(self, seller: User, product_id) -> ServiceResult[Product]:
        try:
            product = Product.objects.select_related("seller").get(id=product_id)
        except (Product.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        if product.seller_id != seller.id:
            return service_err(ErrorCodes.NOT_PRODUCT_OWNER, "You can only modify your own products")
        return service_ok(product)

    def _check_marketplaces(self, seller: User, specs) -> ServiceResult[Dict[str, Marketplace]]:
        """Every referenced marketplace must exist and count the seller as owner or member."""
        ids = {str(spec["marketplace_id"]) for spec in specs if spec.get("marketplace_id")}
        if not ids:
            return service_ok({})

        found = {str(m.id): m for m in Marketplace.objects.filter(id__in=ids)}
        missing = ids - set(found)
        if missing:
            return service_err(ErrorCodes.MARKETPLACE_NOT_FOUND, f"Marketplace {sorted(missing)[0]} not found")

        for marketplace in found.values():
            if not marketplace.has_participant(seller):
                return service_err(
                    ErrorCodes.NOT_MARKETPLACE_MEMBER, f"You are not a member of marketplace {marketplace.name}"
                )
        return service_ok(found)

    def _check_tags(self, tag_ids) -> ServiceResult[List[Tag]]:
        tags = list(Tag.objects.filter(id__in=tag_ids))
        if len(tags) != len(set(tag_ids)):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Unknown tag id")
        return service_ok(tags)

    def _create_price_row(self, product, spec, remote_price_id, marketplaces) -> Price:
        return Price.objects.create(
            product=product,
            unit_amount=spec["unit_amount"],
            currency=spec["currency"],
            is_default=spec["is_default"],
            payment_style=spec["payment_style"],
            allocated_quantity=spec["allocated_quantity"],
            marketplace=marketplaces.get(str(spec["marketplace_id"])) if spec.get("marketplace_id") else None,
            stripe_price_id=remote_price_id,
        )

    def _apply_spec(self, price, spec, remote_price_id, marketplaces) -> Price:
        price.unit_amount = spec["unit_amount"]
        price.currency = spec["currency"]
        price.is_default = spec["is_default"]
        price.payment_style = spec["payment_style"]
        price.allocated_quantity = spec["allocated_quantity"]
        price.marketplace = marketplaces.get(str(spec["marketplace_id"])) if spec.get("marketplace_id") else None
        price.stripe_price_id = remote_price_id
        price.save()
        return price

    def _reload(self, product_id) -> Product:
        return (
            Product.objects.select_related("seller")
            .prefetch_related("prices", "product_tags__tag")
            .get(id=product_id)
        )

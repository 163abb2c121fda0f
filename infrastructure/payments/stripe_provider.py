"""
Stripe Payment Provider
========================

Concrete implementation of PaymentProviderInterface using Stripe Connect.

Sellers get standard connected accounts and checkout uses direct charges: the
session is created on the seller's account and the platform fee is taken
through ``application_fee_amount``.
"""

import logging
from typing import Any, Dict, List, Optional

import stripe
from django.conf import settings

from utils.logging_utils import mask_value

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

logger = logging.getLogger(__name__)

LOCAL_PRODUCT_METADATA_KEY = "localProductId"


class StripeProvider(PaymentProviderInterface):
    """
    Stripe payment provider implementation.

    Configuration (in settings.py):
        STRIPE_SECRET_KEY: Stripe secret API key
        STRIPE_API_VERSION: Pinned Stripe API version
    """

    def __init__(self):
        """Initialize Stripe provider with API credentials."""
        stripe.api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
        stripe.api_version = getattr(settings, "STRIPE_API_VERSION", None)

        if not stripe.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured")

    # ----- Connected accounts -----

    def create_connected_account(self, email: str, refresh_url: str, return_url: str) -> ConnectedAccount:
        try:
            account = stripe.Account.create(type="standard", email=email, business_type="individual")
            logger.info(f"Created Stripe connected account {account.id} for {mask_value(email)}")
        except stripe.StripeError as e:
            logger.error(f"Stripe account creation failed: {str(e)}")
            raise PaymentException(f"Failed to create connected account: {str(e)}") from e

        url = self.create_onboarding_link(account.id, refresh_url, return_url)
        return ConnectedAccount(account_id=account.id, onboarding_url=url)

    def create_onboarding_link(self, account_id: str, refresh_url: str, return_url: str) -> str:
        try:
            link = stripe.AccountLink.create(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type="account_onboarding",
            )
            return link.url
        except stripe.StripeError as e:
            logger.error(f"Stripe onboarding link failed for {account_id}: {str(e)}")
            raise PaymentException(f"Failed to create onboarding link: {str(e)}") from e

    # ----- Products -----

    def create_product(
        self,
        account_id: str,
        name: str,
        description: str = "",
        images: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RemoteProduct:
        params: Dict[str, Any] = {"name": name, "metadata": metadata or {}}
        # Stripe rejects empty descriptions
        if description:
            params["description"] = description
        if images:
            params["images"] = images[:8]

        try:
            product = stripe.Product.create(stripe_account=account_id, **params)
            logger.info(f"Created Stripe product {product.id} on {account_id}")
            return self._to_remote_product(product)
        except stripe.StripeError as e:
            logger.error(f"Stripe product creation failed on {account_id}: {str(e)}")
            raise PaymentException(f"Failed to create product: {str(e)}") from e

    def update_product(self, account_id: str, product_id: str, **fields) -> RemoteProduct:
        params = {key: value for key, value in fields.items() if value is not None}
        if "images" in params:
            params["images"] = params["images"][:8]
        if params.get("description") == "":
            params.pop("description")

        try:
            product = stripe.Product.modify(product_id, stripe_account=account_id, **params)
            logger.info(f"Updated Stripe product {product_id} on {account_id}")
            return self._to_remote_product(product)
        except stripe.StripeError as e:
            logger.error(f"Stripe product update failed for {product_id}: {str(e)}")
            raise PaymentException(f"Failed to update product: {str(e)}") from e

    def find_product_by_local_id(self, account_id: str, local_product_id: str) -> Optional[RemoteProduct]:
        try:
            results = stripe.Product.search(
                query=f"metadata['{LOCAL_PRODUCT_METADATA_KEY}']:'{local_product_id}'",
                limit=1,
                stripe_account=account_id,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe product search failed on {account_id}: {str(e)}")
            raise PaymentException(f"Failed to search products: {str(e)}") from e

        if not results.data:
            return None
        return self._to_remote_product(results.data[0])

    def delete_product(self, account_id: str, product_id: str) -> bool:
        try:
            stripe.Product.delete(product_id, stripe_account=account_id)
            logger.info(f"Deleted Stripe product {product_id} on {account_id}")
            return True
        except stripe.InvalidRequestError as e:
            # Products that already have prices cannot be deleted, only archived
            logger.info(f"Stripe refused to delete {product_id} ({str(e)}), archiving instead")
        except stripe.StripeError as e:
            logger.error(f"Stripe product deletion failed for {product_id}: {str(e)}")
            raise PaymentException(f"Failed to delete product: {str(e)}") from e

        self.update_product(account_id, product_id, active=False)
        return False

    # ----- Prices -----

    def create_price(
        self,
        account_id: str,
        product_id: str,
        unit_amount: int,
        currency: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RemotePrice:
        try:
            price = stripe.Price.create(
                product=product_id,
                unit_amount=unit_amount,
                currency=currency.lower(),
                metadata=metadata or {},
                stripe_account=account_id,
            )
            logger.info(f"Created Stripe price {price.id} ({unit_amount} {currency}) for {product_id}")
            return self._to_remote_price(price)
        except stripe.StripeError as e:
            logger.error(f"Stripe price creation failed for {product_id}: {str(e)}")
            raise PaymentException(f"Failed to create price: {str(e)}") from e

    def update_price(self, account_id: str, price_id: str, metadata: Dict[str, Any]) -> RemotePrice:
        try:
            price = stripe.Price.modify(price_id, metadata=metadata, stripe_account=account_id)
            return self._to_remote_price(price)
        except stripe.StripeError as e:
            logger.error(f"Stripe price update failed for {price_id}: {str(e)}")
            raise PaymentException(f"Failed to update price: {str(e)}") from e

    def deactivate_price(self, account_id: str, price_id: str) -> None:
        try:
            stripe.Price.modify(price_id, active=False, stripe_account=account_id)
            logger.info(f"Deactivated Stripe price {price_id} on {account_id}")
        except stripe.StripeError as e:
            logger.error(f"Stripe price deactivation failed for {price_id}: {str(e)}")
            raise PaymentException(f"Failed to deactivate price: {str(e)}") from e

    def list_prices(self, account_id: str, product_id: str) -> List[RemotePrice]:
        try:
            prices = stripe.Price.list(product=product_id, active=True, limit=100, stripe_account=account_id)
            return [self._to_remote_price(price) for price in prices.auto_paging_iter()]
        except stripe.StripeError as e:
            logger.error(f"Stripe price listing failed for {product_id}: {str(e)}")
            raise PaymentException(f"Failed to list prices: {str(e)}") from e

    # ----- Checkout -----

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
        Create a Stripe checkout session as a direct charge on the seller's account.

        Args:
            account_id: Seller's connected account id
            line_items: Stripe line items (``price`` or ``price_data`` + ``quantity``)
            customer_email: Buyer email
            application_fee_amount: Platform fee in minor units
            currency: ISO currency code
            success_url: Redirect URL on success
            cancel_url: Redirect URL on cancel
            metadata: Custom metadata

        Returns:
            CheckoutSession object

        Raises:
            PaymentException: If session creation fails
        """
        session_params = {
            "mode": "payment",
            "line_items": line_items,
            "customer_email": customer_email,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata or {},
            "payment_intent_data": {"application_fee_amount": application_fee_amount},
        }

        try:
            session = stripe.checkout.Session.create(stripe_account=account_id, **session_params)
        except stripe.StripeError as e:
            logger.error(f"Stripe session creation failed on {account_id}: {str(e)}")
            raise PaymentException(f"Failed to create checkout session: {str(e)}") from e

        logger.info(f"Created Stripe checkout session {session.id} on {account_id}")

        return CheckoutSession(
            session_id=session.id,
            url=session.url,
            amount=session.amount_total,
            currency=currency.lower(),
            status=self._map_stripe_status(session.payment_status),
            destination_account=account_id,
            application_fee_amount=application_fee_amount,
            metadata=metadata or {},
        )

    def expire_checkout_session(self, account_id: str, session_id: str) -> None:
        try:
            stripe.checkout.Session.expire(session_id, stripe_account=account_id)
            logger.info(f"Expired Stripe checkout session {session_id} on {account_id}")
        except stripe.StripeError as e:
            logger.error(f"Failed to expire session {session_id}: {str(e)}")
            raise PaymentException(f"Failed to expire checkout session: {str(e)}") from e

    # ----- Reporting -----

    def list_charges(self, account_id: str, limit: int = 5) -> List[Charge]:
        try:
            charges = stripe.Charge.list(limit=limit, stripe_account=account_id)
        except stripe.StripeError as e:
            logger.error(f"Failed to list charges for {account_id}: {str(e)}")
            raise PaymentException(f"Failed to list charges: {str(e)}") from e

        return [
            Charge(charge_id=charge.id, amount=charge.amount, currency=charge.currency, created=charge.created)
            for charge in charges.data
        ]

    # ----- Mapping helpers -----

    def _to_remote_product(self, product) -> RemoteProduct:
        return RemoteProduct(
            product_id=product.id,
            name=product.name,
            active=product.active,
            metadata=dict(product.metadata or {}),
        )

    def _to_remote_price(self, price) -> RemotePrice:
        return RemotePrice(
            price_id=price.id,
            product_id=price.product,
            unit_amount=price.unit_amount,
            currency=price.currency,
            active=price.active,
            metadata=dict(price.metadata or {}),
        )

    def _map_stripe_status(self, stripe_status: str) -> PaymentStatus:
        """
        Map Stripe session payment status to internal PaymentStatus.

        Args:
            stripe_status: Stripe payment status string

        Returns:
            PaymentStatus enum value
        """
        status_mapping = {
            "unpaid": PaymentStatus.PENDING,
            "paid": PaymentStatus.SUCCEEDED,
            "no_payment_required": PaymentStatus.SUCCEEDED,
        }

        return status_mapping.get(stripe_status, PaymentStatus.PENDING)

"""
CheckoutService - Cart checkout orchestration

Turns a submitted cart into either one checkout session per seller (INSTANT
carts) or one purchase request per line (REQUEST carts).

Cart lines are rebuilt from server-side prices; client-supplied amounts are
never trusted.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction

from authentication.domain.models import User
from infrastructure.payments import PaymentException, PaymentProviderInterface
from marketplace.domain.cart import Cart, CartLine, MixedPaymentStyleError
from marketplace.models import PLACEHOLDER_PRICE_ID, Price, Product
from utils.logging_utils import mask_value
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


def platform_fee(subtotal: int, percent: Optional[Decimal] = None) -> int:
    """Platform fee in minor units: ``subtotal * percent / 100`` rounded half up."""
    if percent is None:
        percent = Decimal(str(getattr(settings, "PLATFORM_FEE_PERCENT", "10")))
    fee = (Decimal(subtotal) * percent / Decimal(100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(fee)


def checkout_urls(origin: str):
    """Success and cancel redirect URLs for a checkout session started from ``origin``."""
    origin = (origin or getattr(settings, "FRONTEND_URL", "")).rstrip("/")
    return f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}", f"{origin}?canceled=true"


def line_item(line: CartLine) -> Dict[str, Any]:
    """Processor line item: the synced remote price when there is one, else inline price data."""
    if line.stripe_price_id:
        return {"price": line.stripe_price_id, "quantity": line.quantity}

    product_data: Dict[str, Any] = {"name": line.name}
    if line.image:
        product_data["images"] = [line.image]
    return {
        "price_data": {
            "currency": line.currency,
            "product_data": product_data,
            "unit_amount": line.unit_price,
        },
        "quantity": line.quantity,
    }


class CheckoutService(BaseService):
    """
    Service for checking out carts.

    Responsibilities:
    - Rebuild the cart from local prices
    - Split INSTANT carts by seller, one session per connected account
    - Record REQUEST carts as pending purchase requests

    Dependencies:
    - PaymentProviderInterface: checkout sessions
    - UserService: buyer email resolution
    - PurchaseRequestService: REQUEST carts
    """

    def __init__(self, payment: PaymentProviderInterface, user_service, purchase_request_service):
        super().__init__()
        self.payment = payment
        self.user_service = user_service
        self.purchase_request_service = purchase_request_service

    @BaseService.log_performance
    def checkout(self, buyer: User, items: List[Dict[str, Any]], origin: str = "") -> ServiceResult[Dict[str, Any]]:
        """
        Check out a cart.

        Args:
            buyer: Authenticated buyer
            items: Lines validated by CheckoutRequestSerializer
                   (product_id, price_id, quantity)
            origin: Client origin used for the redirect URLs

        Returns:
            ServiceResult with a dict:
                payment_style: INSTANT or REQUEST
                sessions: one entry per seller (INSTANT)
                redirect_url: the session URL when exactly one session exists
                purchase_requests: created request ids (REQUEST)
        """
        if not items:
            return service_err(ErrorCodes.EMPTY_CART, "Cart is empty")

        cart_result = self.build_cart(items)
        if not cart_result.ok:
            return cart_result
        cart = cart_result.value

        # Both payment styles need a buyer email; resolve it before any side effect
        email_result = self.user_service.resolve_email(buyer)
        if not email_result.ok:
            return email_result

        if cart.payment_style == Price.REQUEST:
            return self._request_checkout(buyer, cart)
        return self._instant_checkout(buyer, cart, email_result.value, origin)

    def build_cart(self, items: List[Dict[str, Any]]) -> ServiceResult[Cart]:
        """Resolve each submitted line to its local price and add it to a fresh cart."""
        cart = Cart()
        for item in items:
            product = Product.objects.filter(id=item["product_id"]).first()
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {item['product_id']} not found")

            price = Price.objects.filter(id=item["price_id"], product=product).first()
            if price is None:
                return service_err(
                    ErrorCodes.PRICE_NOT_FOUND, f"Price {item['price_id']} not found for product {product.id}"
                )

            line = CartLine(
                product_id=str(product.id),
                seller_id=product.seller_id,
                price_id=str(price.id),
                payment_style=price.payment_style,
                unit_price=price.unit_amount,
                quantity=item.get("quantity", 1),
                name=product.name,
                image=product.images[0] if product.images else "",
                stripe_price_id=self._remote_price_id(product, price),
                currency=price.currency,
            )
            try:
                cart.add(line)
            except MixedPaymentStyleError as e:
                return service_err(ErrorCodes.MIXED_PAYMENT_STYLES, str(e))

        return service_ok(cart)

    def _instant_checkout(self, buyer: User, cart: Cart, email: str, origin: str) -> ServiceResult[Dict[str, Any]]:
        partitions = cart.by_seller()
        sellers = {seller.id: seller for seller in User.objects.filter(id__in=list(partitions.keys()))}

        # Every seller must be payable before any session exists
        for seller_id, lines in partitions.items():
            seller = sellers.get(seller_id)
            if seller is None:
                return service_err(ErrorCodes.USER_NOT_FOUND, f"Seller {seller_id} not found")
            if not seller.stripe_account_id:
                return service_err(
                    ErrorCodes.STRIPE_ACCOUNT_REQUIRED,
                    f"Seller {seller.slug or seller_id} cannot accept payments yet",
                )
            if len({line.currency for line in lines}) > 1:
                return service_err(
                    ErrorCodes.VALIDATION_ERROR, f"Items from seller {seller.slug or seller_id} use different currencies"
                )

        success_url, cancel_url = checkout_urls(origin)
        created = []
        for seller_id, lines in partitions.items():
            seller = sellers[seller_id]
            subtotal = sum(line.subtotal for line in lines)
            fee = platform_fee(subtotal)
            try:
                session = self.payment.create_checkout_session(
                    seller.stripe_account_id,
                    line_items=[line_item(line) for line in lines],
                    customer_email=email,
                    application_fee_amount=fee,
                    currency=lines[0].currency,
                    success_url=success_url,
                    cancel_url=cancel_url,
                    metadata={"userId": buyer.id, "sellerId": seller.id},
                )
            except PaymentException as e:
                self.logger.error(f"Checkout session failed for seller {seller.id}: {str(e)}")
                self._expire_sessions(created)
                return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Checkout failed: {str(e)}")

            created.append((seller, session, subtotal, fee))

        sessions = [
            {
                "seller_id": seller.id,
                "seller_slug": seller.slug,
                "session_id": session.session_id,
                "url": session.url,
                "subtotal": subtotal,
                "application_fee_amount": fee,
                "currency": session.currency,
            }
            for seller, session, subtotal, fee in created
        ]
        self.logger.info(
            f"Checkout for {buyer.id} ({mask_value(email)}): {len(sessions)} session(s), total {cart.total}"
        )
        return service_ok(
            {
                "payment_style": Price.INSTANT,
                "sessions": sessions,
                "redirect_url": sessions[0]["url"] if len(sessions) == 1 else None,
                "purchase_requests": [],
            }
        )

    def _request_checkout(self, buyer: User, cart: Cart) -> ServiceResult[Dict[str, Any]]:
        request_ids = []
        with transaction.atomic():
            for line in cart:
                result = self.purchase_request_service.create(
                    buyer, line.product_id, line.price_id, quantity=line.quantity
                )
                if not result.ok:
                    transaction.set_rollback(True)
                    return result
                request_ids.append(str(result.value.id))

        self.logger.info(f"Checkout for {buyer.id}: {len(request_ids)} purchase request(s) created")
        return service_ok(
            {
                "payment_style": Price.REQUEST,
                "sessions": [],
                "redirect_url": None,
                "purchase_requests": request_ids,
            }
        )

    def _expire_sessions(self, created) -> None:
        for seller, session, _subtotal, _fee in created:
            try:
                self.payment.expire_checkout_session(seller.stripe_account_id, session.session_id)
            except PaymentException as e:
                self.logger.warning(f"Could not expire session {session.session_id}: {str(e)}")

    def _remote_price_id(self, product: Product, price: Price) -> Optional[str]:
        if product.stripe_product_id and price.stripe_price_id and price.stripe_price_id != PLACEHOLDER_PRICE_ID:
            return price.stripe_price_id
        return None

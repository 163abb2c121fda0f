"""
PurchaseRequestService - approval-gated purchases

Buyers request REQUEST-style prices; the seller approves (which opens a
checkout session for the buyer) or rejects. Transitions are guarded by
``PurchaseRequest.approve`` / ``reject``.
"""

from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import Q

from authentication.domain.models import User
from infrastructure.payments import PaymentException, PaymentProviderInterface
from marketplace.domain.cart import CartLine
from marketplace.models import Price, Product
from payment_system.domain.exceptions import InvalidTransitionError
from payment_system.domain.models import PurchaseRequest
from payment_system.signals import purchase_request_rejected
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .checkout_service import checkout_urls, line_item, platform_fee


class PurchaseRequestService(BaseService):
    """
    Service for purchase requests.

    Responsibilities:
    - Create requests against REQUEST prices
    - Approve (with checkout session) and reject as the seller
    - List a user's requests
    """

    ROLE_BUYER = "buyer"
    ROLE_SELLER = "seller"

    def __init__(self, payment: PaymentProviderInterface, user_service):
        super().__init__()
        self.payment = payment
        self.user_service = user_service

    @BaseService.log_performance
    def create(self, buyer: User, product_id, price_id, quantity: int = 1) -> ServiceResult[PurchaseRequest]:
        """
        Create a PENDING request, recording the price's amount and currency.

        Returns:
            ServiceResult with the PurchaseRequest, or product_not_found /
            price_not_found / not_request_price
        """
        product = Product.objects.filter(id=product_id).first()
        if product is None:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

        price = Price.objects.filter(id=price_id, product=product).first()
        if price is None:
            return service_err(ErrorCodes.PRICE_NOT_FOUND, f"Price {price_id} not found for product {product_id}")

        if price.payment_style != Price.REQUEST:
            return service_err(ErrorCodes.NOT_REQUEST_PRICE, "This product does not accept purchase requests")

        purchase_request = PurchaseRequest.objects.create(
            buyer=buyer,
            seller_id=product.seller_id,
            product=product,
            price=price,
            unit_amount=price.unit_amount,
            currency=price.currency,
            quantity=quantity,
        )
        self.logger.info(f"Purchase request {purchase_request.id} created by {buyer.id} for product {product.id}")
        return service_ok(purchase_request)

    @BaseService.log_performance
    def approve(self, seller: User, request_id, origin: str = "") -> ServiceResult[PurchaseRequest]:
        """
        Approve a PENDING request and open a checkout session for the buyer.

        The status change is only committed if the session was created.

        Returns:
            ServiceResult with the approved PurchaseRequest; its
            ``checkout_url`` attribute holds the session URL
        """
        found = self._get_for_seller(seller, request_id)
        if not found.ok:
            return found
        purchase_request = found.value

        if not purchase_request.is_pending:
            error = InvalidTransitionError(purchase_request.status, PurchaseRequest.APPROVED)
            return service_err(ErrorCodes.INVALID_REQUEST_STATE, str(error))

        if not seller.stripe_account_id:
            return service_err(ErrorCodes.STRIPE_ACCOUNT_REQUIRED, "Connect a payment account before approving")

        email_result = self.user_service.resolve_email(purchase_request.buyer)
        if not email_result.ok:
            return email_result

        success_url, cancel_url = checkout_urls(origin)
        session = None
        try:
            with transaction.atomic():
                locked = PurchaseRequest.objects.select_for_update().get(pk=purchase_request.pk)
                locked.approve()

                session = self.payment.create_checkout_session(
                    seller.stripe_account_id,
                    line_items=[line_item(self._line(locked))],
                    customer_email=email_result.value,
                    application_fee_amount=platform_fee(locked.total_amount),
                    currency=locked.currency,
                    success_url=success_url,
                    cancel_url=cancel_url,
                    metadata={"userId": locked.buyer_id, "purchaseRequestId": str(locked.id)},
                )

                locked.checkout_session_id = session.session_id
                locked.save(update_fields=["status", "checkout_session_id", "updated_at"])
        except InvalidTransitionError as e:
            return service_err(ErrorCodes.INVALID_REQUEST_STATE, str(e))
        except PaymentException as e:
            self.logger.error(f"Approval of request {purchase_request.id} failed: {str(e)}")
            return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Could not create checkout session: {str(e)}")
        except DatabaseError as e:
            self.logger.error(f"Approval of request {purchase_request.id} could not be saved: {str(e)}", exc_info=True)
            if session is not None:
                self._expire_session(seller, session.session_id)
            return service_err(ErrorCodes.DATABASE_ERROR, "Failed to record approval")

        locked.checkout_url = session.url
        self.logger.info(f"Purchase request {locked.id} approved; session {session.session_id}")
        return service_ok(locked)

    @BaseService.log_performance
    def reject(self, seller: User, request_id) -> ServiceResult[PurchaseRequest]:
        found = self._get_for_seller(seller, request_id)
        if not found.ok:
            return found

        try:
            with transaction.atomic():
                purchase_request = PurchaseRequest.objects.select_for_update().get(pk=found.value.pk)
                purchase_request.reject()
                purchase_request.save(update_fields=["status", "updated_at"])
        except InvalidTransitionError as e:
            return service_err(ErrorCodes.INVALID_REQUEST_STATE, str(e))

        purchase_request_rejected.send(sender=PurchaseRequest, purchase_request=purchase_request)
        self.logger.info(f"Purchase request {purchase_request.id} rejected")
        return service_ok(purchase_request)

    def list_for_user(self, user: User, role: Optional[str] = None) -> List[PurchaseRequest]:
        """Requests where the user is the buyer, the seller, or either when ``role`` is omitted."""
        if role == self.ROLE_BUYER:
            condition = Q(buyer=user)
        elif role == self.ROLE_SELLER:
            condition = Q(seller=user)
        else:
            condition = Q(buyer=user) | Q(seller=user)
        return list(
            PurchaseRequest.objects.filter(condition).select_related("buyer", "seller", "product", "price")
        )

    def _expire_session(self, seller: User, session_id: str) -> None:
        try:
            self.payment.expire_checkout_session(seller.stripe_account_id, session_id)
        except PaymentException as e:
            self.logger.error(f"Orphaned remote object: checkout session {session_id} could not be expired: {str(e)}")

    def _get_for_seller(self, seller: User, request_id) -> ServiceResult[PurchaseRequest]:
        try:
            purchase_request = PurchaseRequest.objects.select_related("buyer", "product").get(id=request_id)
        except (PurchaseRequest.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.REQUEST_NOT_FOUND, "Purchase request not found")

        if purchase_request.seller_id != seller.id:
            return service_err(ErrorCodes.NOT_REQUEST_SELLER, "Only the seller can act on this request")
        return service_ok(purchase_request)

    def _line(self, purchase_request: PurchaseRequest) -> CartLine:
        # Charged at the recorded amount, so always inline price data
        product = purchase_request.product
        return CartLine(
            product_id=str(product.id),
            seller_id=purchase_request.seller_id,
            price_id=str(purchase_request.price_id or ""),
            payment_style=Price.REQUEST,
            unit_price=purchase_request.unit_amount,
            quantity=purchase_request.quantity,
            name=product.name,
            image=product.images[0] if product.images else "",
            currency=purchase_request.currency,
        )

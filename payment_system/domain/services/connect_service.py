"""
ConnectService - seller payment accounts

Onboarding, disconnecting and revenue insights for a seller's connected
account.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction

from authentication.domain.models import User
from infrastructure.payments import PaymentException, PaymentProviderInterface
from utils.logging_utils import mask_value
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

INSIGHTS_CHARGE_LIMIT = 5


def _to_major_units(minor: Decimal) -> str:
    return str((minor / Decimal(100)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class ConnectService(BaseService):
    """
    Service for the seller's connected account.

    Connecting promotes the user to the artisan role. Disconnecting only
    forgets the account locally; the processor account is left untouched.
    """

    def __init__(self, payment: PaymentProviderInterface):
        super().__init__()
        self.payment = payment

    @BaseService.log_performance
    def connect(self, user: User, email: Optional[str] = None) -> ServiceResult[str]:
        """
        Create a connected account for ``user`` and return its onboarding URL.

        Args:
            user: Authenticated user
            email: Account email; defaults to the user's email
        """
        email = email or user.email
        if not email:
            return service_err(ErrorCodes.VALIDATION_ERROR, "An email address is required to connect an account")

        refresh_url, return_url = self._onboarding_urls()
        try:
            account = self.payment.create_connected_account(email, refresh_url, return_url)
        except PaymentException as e:
            return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Failed to create payment account: {str(e)}")

        with transaction.atomic():
            user.stripe_account_id = account.account_id
            user.role = User.ROLE_ARTISAN
            user.save(update_fields=["stripe_account_id", "role"])

        self.logger.info(f"Connected account {mask_value(account.account_id)} for {user.id} ({mask_value(email)})")
        return service_ok(account.onboarding_url)

    @BaseService.log_performance
    def onboarding_link(self, user: User) -> ServiceResult[str]:
        """Fresh onboarding link for an already connected account."""
        if not user.stripe_account_id:
            return service_err(ErrorCodes.STRIPE_ACCOUNT_REQUIRED, "No payment account connected")

        refresh_url, return_url = self._onboarding_urls()
        try:
            url = self.payment.create_onboarding_link(user.stripe_account_id, refresh_url, return_url)
        except PaymentException as e:
            return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Failed to create onboarding link: {str(e)}")
        return service_ok(url)

    @BaseService.log_performance
    def disconnect(self, user: User) -> ServiceResult[None]:
        if not user.stripe_account_id:
            return service_err(ErrorCodes.STRIPE_ACCOUNT_REQUIRED, "No payment account connected")

        previous = user.stripe_account_id
        user.stripe_account_id = None
        user.save(update_fields=["stripe_account_id"])
        self.logger.info(f"Disconnected account {mask_value(previous)} from {user.id}")
        return service_ok(None)

    @BaseService.log_performance
    def insights_summary(self, user: User) -> ServiceResult[Dict[str, Any]]:
        """
        Revenue summary over the most recent charges of the connected account.

        Returns:
            ServiceResult with totalRevenue and averageCharge (major units,
            two decimals), transactions (count) and lastTransaction (ISO
            timestamp of the newest charge, or "N/A")
        """
        if not user.stripe_account_id:
            return service_err(ErrorCodes.STRIPE_ACCOUNT_REQUIRED, "No payment account connected")

        try:
            charges = self.payment.list_charges(user.stripe_account_id, limit=INSIGHTS_CHARGE_LIMIT)
        except PaymentException as e:
            return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, f"Failed to load charges: {str(e)}")

        total = Decimal(sum(charge.amount for charge in charges))
        count = len(charges)
        average = total / count if count else Decimal(0)

        last_transaction = "N/A"
        if charges:
            newest = max(charges, key=lambda charge: charge.created)
            last_transaction = datetime.fromtimestamp(newest.created, tz=timezone.utc).isoformat()

        return service_ok(
            {
                "totalRevenue": _to_major_units(total),
                "averageCharge": _to_major_units(average),
                "transactions": count,
                "lastTransaction": last_transaction,
            }
        )

    def _onboarding_urls(self):
        frontend = getattr(settings, "FRONTEND_URL", "").rstrip("/")
        refresh_url = getattr(settings, "STRIPE_CONNECT_REFRESH_URL", "") or f"{frontend}/onboarding/refresh"
        return_url = getattr(settings, "STRIPE_CONNECT_RETURN_URL", "") or f"{frontend}/onboarding/complete"
        return refresh_url, return_url

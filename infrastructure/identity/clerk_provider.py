"""
Clerk Identity Provider
========================

Concrete implementation of IdentityProviderInterface backed by Clerk.
User lookups go through the Clerk Backend API; webhooks are signed by Svix.
"""

import logging
from typing import Any, Dict, Mapping

import requests
from django.conf import settings
from svix.webhooks import Webhook, WebhookVerificationError

from utils.logging_utils import mask_value

from .interface import IdentityEvent, IdentityException, IdentityProviderInterface, IdentityUser

logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class ClerkProvider(IdentityProviderInterface):
    """
    Clerk identity provider implementation.

    Configuration (in settings.py):
        CLERK_SECRET_KEY: Backend API secret key
        CLERK_API_URL: Backend API base URL
        CLERK_WEBHOOK_SECRET: Svix signing secret of the webhook endpoint
    """

    def __init__(self, timeout: int = 10):
        self.secret_key = getattr(settings, "CLERK_SECRET_KEY", "")
        self.api_url = getattr(settings, "CLERK_API_URL", "https://api.clerk.com/v1").rstrip("/")
        self.webhook_secret = getattr(settings, "CLERK_WEBHOOK_SECRET", "")
        self.timeout = timeout

        if not self.secret_key:
            logger.warning("CLERK_SECRET_KEY not configured")

    def get_user(self, user_id: str) -> IdentityUser:
        try:
            response = requests.get(
                f"{self.api_url}/users/{user_id}",
                headers={"Authorization": f"Bearer {self.secret_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Clerk user lookup failed for {user_id}: {str(e)}")
            raise IdentityException(f"Failed to fetch user {user_id}: {str(e)}") from e

        user = self._to_identity_user(response.json())
        logger.debug(f"Fetched Clerk user {user_id} ({mask_value(user.email or '')})")
        return user

    def verify_webhook(self, payload: bytes, headers: Mapping[str, str]) -> IdentityEvent:
        if not self.webhook_secret:
            raise IdentityException("CLERK_WEBHOOK_SECRET not configured")

        svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
        if not all(svix_headers.values()):
            raise IdentityException("Missing svix headers")

        try:
            event = Webhook(self.webhook_secret).verify(payload, svix_headers)
        except WebhookVerificationError as e:
            logger.warning(f"Clerk webhook verification failed: {str(e)}")
            raise IdentityException("Webhook signature verification failed") from e

        logger.info(f"Verified Clerk webhook event: {event.get('type')}")
        return IdentityEvent(event_type=event.get("type", ""), data=event.get("data") or {})

    def _to_identity_user(self, data: Dict[str, Any]) -> IdentityUser:
        email = None
        primary_id = data.get("primary_email_address_id")
        addresses = data.get("email_addresses") or []
        for address in addresses:
            if address.get("id") == primary_id:
                email = address.get("email_address")
                break
        if email is None and addresses:
            email = addresses[0].get("email_address")

        return IdentityUser(
            user_id=data["id"],
            email=email,
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            image_url=data.get("image_url") or "",
        )

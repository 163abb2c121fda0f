"""
UserService - identity-provider user lifecycle

Keeps local User rows in step with the identity provider: webhook-driven
creation/deletion, lazy creation on first authenticated use, buyer email
resolution and slug assignment.
"""

from typing import Optional

from django.db import IntegrityError, transaction
from django.utils.text import slugify

from authentication.domain.models import User
from infrastructure.identity import IdentityEvent, IdentityException, IdentityProviderInterface
from utils.logging_utils import mask_value
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.slugs import unique_slug

USER_CREATED = "user.created"
USER_DELETED = "user.deleted"


def default_user_slug(user_id: str) -> str:
    return f"user-{slugify(user_id[:5])}"


class UserService(BaseService):
    """
    Service for the local mirror of identity-provider users.

    Responsibilities:
    - Apply verified ``user.created`` / ``user.deleted`` webhook events
    - Create users lazily on first authenticated request
    - Resolve a user's email (local cache, else the identity provider)
    - Assign unique slugs
    """

    def __init__(self, identity: IdentityProviderInterface):
        super().__init__()
        self.identity = identity

    @BaseService.log_performance
    def handle_event(self, event: IdentityEvent) -> ServiceResult[Optional[User]]:
        """
        Apply a verified identity-provider event.

        Unknown event types are acknowledged and ignored so the provider
        stops retrying them.
        """
        user_id = event.user_id
        if not user_id:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Event payload has no user id")

        if event.event_type == USER_CREATED:
            user = self.ensure_user(user_id, email=self._primary_email(event.data))
            return service_ok(user)

        if event.event_type == USER_DELETED:
            deleted, _ = User.objects.filter(id=user_id).delete()
            if deleted:
                self.logger.info(f"Deleted user {user_id}")
            else:
                self.logger.info(f"Delete event for unknown user {user_id} ignored")
            return service_ok(None)

        self.logger.debug(f"Ignoring identity event {event.event_type}")
        return service_ok(None)

    def ensure_user(self, user_id: str, email: str = "") -> User:
        """Return the local user, creating it (with a slug) when missing."""
        user = User.objects.filter(id=user_id).first()
        if user is not None:
            if email and not user.email:
                user.email = email
                user.save(update_fields=["email"])
            return user

        try:
            with transaction.atomic():
                user = User.objects.create(
                    id=user_id,
                    email=email,
                    slug=unique_slug(User, default_user_slug(user_id)),
                )
        except IntegrityError:
            # Webhook and first request raced; the other one won
            return User.objects.get(id=user_id)

        self.logger.info(f"Created user {user_id} ({mask_value(email) if email else 'no email'})")
        return user

    @BaseService.log_performance
    def resolve_email(self, user: User) -> ServiceResult[str]:
        """
        Resolve the user's email, caching a provider lookup on the user row.

        Returns:
            ServiceResult with the email, or missing_buyer_email /
            identity_provider_error
        """
        if user.email:
            return service_ok(user.email)

        try:
            remote_user = self.identity.get_user(user.id)
        except IdentityException as e:
            return service_err(ErrorCodes.IDENTITY_PROVIDER_ERROR, str(e))

        if not remote_user.email:
            return service_err(ErrorCodes.MISSING_BUYER_EMAIL, "No email address on file for this account")

        user.email = remote_user.email
        user.save(update_fields=["email"])
        return service_ok(user.email)

    def get_by_slug(self, slug: str) -> ServiceResult[User]:
        user = User.objects.filter(slug=slug).first()
        if user is None:
            return service_err(ErrorCodes.USER_NOT_FOUND, f"User {slug} not found")
        return service_ok(user)

    def generate_missing_slugs(self) -> int:
        """Assign a slug to every user that has none. Returns the number of users updated."""
        updated = 0
        for user in User.objects.filter(slug__isnull=True).order_by("date_joined"):
            user.slug = unique_slug(User, default_user_slug(user.id), exclude_pk=user.pk)
            user.save(update_fields=["slug"])
            self.logger.info(f"Updated user {user.id} with slug {user.slug}")
            updated += 1
        return updated

    def _primary_email(self, data: dict) -> str:
        primary_id = data.get("primary_email_address_id")
        for address in data.get("email_addresses") or []:
            if address.get("id") == primary_id:
                return address.get("email_address") or ""
        return ""

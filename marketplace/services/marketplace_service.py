"""
MarketplaceService - marketplaces and membership

Creator becomes owner and member. Members join and leave freely; owners
cannot leave. Slugs derive from the name and collide-safe with a counter
suffix, the same way user slugs do.
"""

from typing import Any, Dict

from django.db import transaction
from django.db.models import Q

from authentication.domain.models import User
from marketplace.models import Marketplace
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.slugs import slug_base, unique_slug


class MarketplaceService(BaseService):
    """Service for marketplace creation, lookup and membership."""

    @BaseService.log_performance
    @transaction.atomic
    def create_marketplace(self, owner: User, data: Dict[str, Any]) -> ServiceResult[Marketplace]:
        name = data["name"].strip()
        if not name:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Marketplace name is required")

        marketplace = Marketplace.objects.create(
            name=name,
            slug=unique_slug(Marketplace, slug_base(name)),
            description=data.get("description") or "",
        )
        marketplace.owners.add(owner)
        marketplace.members.add(owner)

        self.logger.info(f"Created marketplace {marketplace.slug} owned by {owner.id}")
        return service_ok(marketplace)

    def list_for_user(self, user: User):
        """Marketplaces the user owns or belongs to."""
        return (
            Marketplace.objects.filter(Q(owners=user) | Q(members=user))
            .distinct()
            .prefetch_related("owners", "members")
        )

    def list_all(self):
        return Marketplace.objects.all().prefetch_related("owners", "members")

    def get_by_slug(self, slug: str) -> ServiceResult[Marketplace]:
        marketplace = Marketplace.objects.prefetch_related("owners", "members").filter(slug=slug).first()
        if marketplace is None:
            return service_err(ErrorCodes.MARKETPLACE_NOT_FOUND, "Marketplace not found")
        return service_ok(marketplace)

    @BaseService.log_performance
    def join(self, user: User, marketplace_id) -> ServiceResult[Marketplace]:
        marketplace = Marketplace.objects.filter(id=marketplace_id).first()
        if marketplace is None:
            return service_err(ErrorCodes.MARKETPLACE_NOT_FOUND, "Marketplace not found")

        if marketplace.has_participant(user):
            return service_err(ErrorCodes.ALREADY_MEMBER, "Already a member")

        marketplace.members.add(user)
        self.logger.info(f"{user.id} joined marketplace {marketplace.slug}")
        return service_ok(marketplace)

    @BaseService.log_performance
    def leave(self, user: User, marketplace_id) -> ServiceResult[Marketplace]:
        marketplace = Marketplace.objects.filter(id=marketplace_id).first()
        if marketplace is None:
            return service_err(ErrorCodes.MARKETPLACE_NOT_FOUND, "Marketplace not found")

        if marketplace.is_owner(user):
            return service_err(ErrorCodes.OWNER_CANNOT_LEAVE, "Owners cannot leave")
        if not marketplace.is_member(user):
            return service_err(ErrorCodes.NOT_MEMBER, "Not a member")

        marketplace.members.remove(user)
        self.logger.info(f"{user.id} left marketplace {marketplace.slug}")
        return service_ok(marketplace)

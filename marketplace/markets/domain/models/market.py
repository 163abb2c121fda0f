import uuid

from django.conf import settings
from django.db import models


class Marketplace(models.Model):
    """
    A community storefront.

    The creator becomes owner and member. Owners cannot leave; members join
    and leave freely. Prices can be scoped to a marketplace.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)

    owners = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name="owned_marketplaces", blank=True)
    members = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name="member_marketplaces", blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"

    def is_owner(self, user) -> bool:
        return self.owners.filter(pk=user.pk).exists()

    def is_member(self, user) -> bool:
        return self.members.filter(pk=user.pk).exists()

    def has_participant(self, user) -> bool:
        return self.is_owner(user) or self.is_member(user)

    def __str__(self):
        return self.name

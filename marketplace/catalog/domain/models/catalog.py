import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum

PLACEHOLDER_PRICE_ID = "placeholder"


class Product(models.Model):
    """
    A seller's product and its optional remote counterpart.

    The id is generated before any remote call so the remote product can
    carry it as ``localProductId`` metadata.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    images = models.JSONField(default=list, blank=True, help_text="Ordered image URLs")

    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="products")

    # Payment processor link
    stripe_product_id = models.CharField(max_length=255, null=True, blank=True)
    needs_sync = models.BooleanField(default=False, help_text="Local changes not yet reflected remotely")

    # Inventory
    total_quantity = models.PositiveIntegerField(default=0, help_text="Sum of the prices' allocated quantities")

    tags = models.ManyToManyField("marketplace.Tag", through="marketplace.ProductTag", related_name="products")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["seller", "-created_at"], name="marketplace_seller__5a1c2e_idx"),
            models.Index(fields=["needs_sync"], name="marketplace_needs_s_8d03b1_idx"),
        ]

    @property
    def is_synced(self) -> bool:
        return bool(self.stripe_product_id) and not self.needs_sync

    def recompute_total_quantity(self) -> int:
        total = self.prices.aggregate(total=Sum("allocated_quantity"))["total"] or 0
        self.total_quantity = total
        return total

    def __str__(self):
        return self.name


class Price(models.Model):
    """
    One way to buy a product.

    ``stripe_price_id`` holds either the remote price id or
    ``PLACEHOLDER_PRICE_ID`` while the seller has no connected account.
    Remote amounts are immutable: an amount change means a new remote price.
    """

    INSTANT = "INSTANT"
    REQUEST = "REQUEST"

    PAYMENT_STYLE_CHOICES = [
        (INSTANT, "Instant"),
        (REQUEST, "Request"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="prices")
    marketplace = models.ForeignKey(
        "marketplace.Marketplace", on_delete=models.CASCADE, null=True, blank=True, related_name="prices"
    )

    unit_amount = models.PositiveIntegerField(validators=[MinValueValidator(1)], help_text="Minor currency units")
    currency = models.CharField(max_length=3, default="usd")
    is_default = models.BooleanField(default=False)
    payment_style = models.CharField(max_length=10, choices=PAYMENT_STYLE_CHOICES, default=INSTANT)
    allocated_quantity = models.PositiveIntegerField(default=0)

    stripe_price_id = models.CharField(max_length=255, default=PLACEHOLDER_PRICE_ID)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["product", "-created_at"], name="marketplace_product_3f9e7a_idx"),
            models.Index(fields=["marketplace", "product"], name="marketplace_marketp_b27c40_idx"),
        ]

    @property
    def is_placeholder(self) -> bool:
        return not self.stripe_price_id or self.stripe_price_id == PLACEHOLDER_PRICE_ID

    def __str__(self):
        return f"{self.product.name} - {self.unit_amount} {self.currency} ({self.payment_style})"


class Tag(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_by = models.CharField(max_length=255, blank=True, help_text="Attribution supplied by the client")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        app_label = "marketplace"

    def __str__(self):
        return self.name


class ProductTag(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="product_tags")
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="product_tags")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(fields=["product", "tag"], name="unique_product_tag"),
        ]

    def __str__(self):
        return f"{self.product.name} #{self.tag.name}"

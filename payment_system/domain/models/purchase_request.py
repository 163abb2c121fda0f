import uuid

from django.conf import settings
from django.db import models

from payment_system.domain.exceptions import InvalidTransitionError


class PurchaseRequest(models.Model):
    """
    A buyer's request to purchase a product at a REQUEST-style price.

    Only PENDING requests can be approved or rejected; both outcomes are
    terminal. The unit amount and currency are recorded at creation so the
    request survives later price edits or removal.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="purchase_requests_made"
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="purchase_requests_received"
    )
    product = models.ForeignKey("marketplace.Product", on_delete=models.CASCADE, related_name="purchase_requests")
    price = models.ForeignKey(
        "marketplace.Price", on_delete=models.SET_NULL, null=True, blank=True, related_name="purchase_requests"
    )

    # Snapshot of the price at request time
    unit_amount = models.PositiveIntegerField()
    currency = models.CharField(max_length=3, default="usd")
    quantity = models.PositiveIntegerField(default=1)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    checkout_session_id = models.CharField(max_length=255, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "payment_system"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["seller", "status"], name="purchase_re_seller__4b8d21_idx"),
            models.Index(fields=["buyer", "-created_at"], name="purchase_re_buyer_i_9c0e57_idx"),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == self.PENDING

    @property
    def total_amount(self) -> int:
        return self.unit_amount * self.quantity

    def approve(self) -> None:
        self._transition(self.APPROVED)

    def reject(self) -> None:
        self._transition(self.REJECTED)

    def _transition(self, target: str) -> None:
        if self.status != self.PENDING:
            raise InvalidTransitionError(self.status, target)
        self.status = target

    def __str__(self):
        return f"{self.buyer_id} -> {self.product_id} [{self.status}]"

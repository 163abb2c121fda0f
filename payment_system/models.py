from payment_system.domain.models import PurchaseRequest  # noqa: F401

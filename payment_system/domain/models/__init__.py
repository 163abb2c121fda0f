from .purchase_request import PurchaseRequest


__all__ = ["PurchaseRequest"]

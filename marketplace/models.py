from marketplace.catalog.domain.models import PLACEHOLDER_PRICE_ID, Price, Product, ProductTag, Tag
from marketplace.markets.domain.models import Marketplace


__all__ = [
    "Marketplace",
    "Product",
    "Price",
    "Tag",
    "ProductTag",
    "PLACEHOLDER_PRICE_ID",
]

from .catalog import PLACEHOLDER_PRICE_ID, Price, Product, ProductTag, Tag


__all__ = [
    "PLACEHOLDER_PRICE_ID",
    "Product",
    "Price",
    "Tag",
    "ProductTag",
]

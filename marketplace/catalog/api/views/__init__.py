from .product_views import (
    product_create,
    product_detail,
    product_sync,
    product_sync_all,
    product_tags,
    recent_products,
)
from .tag_views import tag_list


__all__ = [
    "product_create",
    "product_detail",
    "product_tags",
    "product_sync",
    "product_sync_all",
    "recent_products",
    "tag_list",
]

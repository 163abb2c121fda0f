from django.urls import path

from marketplace.catalog.api.views import (
    product_create,
    product_detail,
    product_sync,
    product_sync_all,
    product_tags,
    recent_products,
    tag_list,
)
from marketplace.markets.api.views import marketplace_detail, marketplace_list, marketplace_membership

app_name = "marketplace"

urlpatterns = [
    # Marketplaces
    path("marketplaces/", marketplace_list, name="marketplace-list"),
    path("marketplaces/<uuid:marketplace_id>/membership/", marketplace_membership, name="marketplace-membership"),
    path("marketplaces/<slug:slug>/", marketplace_detail, name="marketplace-detail"),
    # Products (fixed paths before the id route)
    path("products/", product_create, name="product-create"),
    path("products/recent/", recent_products, name="product-recent"),
    path("products/sync/", product_sync, name="product-sync"),
    path("products/sync-all/", product_sync_all, name="product-sync-all"),
    path("products/<uuid:product_id>/", product_detail, name="product-detail"),
    path("products/<uuid:product_id>/tags/", product_tags, name="product-tags"),
    # Tags
    path("tags/", tag_list, name="tag-list"),
]

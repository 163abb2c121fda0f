"""
ListingService - read paths for storefront pages

Read-only queries: recent products with their latest price and tags,
products priced in a marketplace, a seller's products, and the dashboard.
"""

from typing import Any, Dict, List

from django.db.models import OuterRef, Prefetch, Q, Subquery

from authentication.domain.models import User
from marketplace.models import Marketplace, Price, Product
from utils.service_base import BaseService, ServiceResult, service_ok

RECENT_LIMIT = 20


class ListingService(BaseService):
    """Service for storefront read queries."""

    @BaseService.log_performance
    def recent_products(self, limit: int = RECENT_LIMIT) -> ServiceResult[List[Product]]:
        """
        Newest products, each annotated with its most recently created price.

        Annotations: ``latest_price_id``, ``latest_unit_amount``,
        ``latest_currency``, ``latest_payment_style``. Products without any
        price are left out.
        """
        latest = Price.objects.filter(product=OuterRef("pk")).order_by("-created_at")
        products = (
            Product.objects.select_related("seller")
            .annotate(
                latest_price_id=Subquery(latest.values("id")[:1]),
                latest_unit_amount=Subquery(latest.values("unit_amount")[:1]),
                latest_currency=Subquery(latest.values("currency")[:1]),
                latest_payment_style=Subquery(latest.values("payment_style")[:1]),
            )
            .filter(latest_price_id__isnull=False)
            .prefetch_related("product_tags__tag")
            .order_by("-created_at")[:limit]
        )
        return service_ok(list(products))

    def marketplace_products(self, marketplace: Marketplace) -> ServiceResult[List[Product]]:
        """Products with a price scoped to ``marketplace``; only those prices are attached."""
        scoped_prices = Price.objects.filter(marketplace=marketplace)
        products = (
            Product.objects.filter(prices__marketplace=marketplace)
            .distinct()
            .select_related("seller")
            .prefetch_related(
                Prefetch("prices", queryset=scoped_prices, to_attr="marketplace_prices"),
                "product_tags__tag",
            )
            .order_by("-created_at")
        )
        return service_ok(list(products))

    def seller_products(self, seller: User) -> ServiceResult[List[Product]]:
        products = (
            Product.objects.filter(seller=seller)
            .select_related("seller")
            .prefetch_related("prices", "product_tags__tag")
            .order_by("-created_at")
        )
        return service_ok(list(products))

    def dashboard(self, user: User) -> ServiceResult[Dict[str, Any]]:
        """Own products and every marketplace the user owns or belongs to."""
        marketplaces = (
            Marketplace.objects.filter(Q(owners=user) | Q(members=user))
            .distinct()
            .prefetch_related("owners", "members")
        )
        return service_ok(
            {
                "products": self.seller_products(user).value,
                "marketplaces": list(marketplaces),
            }
        )

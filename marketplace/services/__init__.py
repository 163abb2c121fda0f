"""
Marketplace Service Layer

This package contains all business logic for the marketplace app, organized
into domain services.

Services:
- CatalogService: Product CRUD with remote reconciliation
- SyncService: Force sync of products to the seller's connected account
- MarketplaceService: Marketplaces and membership
- TagService: Tag suggestions and creation
- ListingService: Storefront read queries

Usage:
    from infrastructure.container import container

    result = container.catalog_service().create_product(seller, data)

    if result.ok:
        product = result.value
    else:
        error = result.error
"""

from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .catalog_service import CatalogService
from .listing_service import ListingService
from .marketplace_service import MarketplaceService
from .sync_service import SyncService
from .tag_service import TagService

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
    # Services
    "CatalogService",
    "SyncService",
    "MarketplaceService",
    "TagService",
    "ListingService",
]

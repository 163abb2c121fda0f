"""
TagService - tag suggestions and creation
"""

from typing import Any, Dict, List

from django.db import IntegrityError, transaction

from marketplace.models import Product, Tag
from utils.service_base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

SUGGESTION_LIMIT = 10


class TagService(BaseService):
    """Service for tag lookup and creation."""

    def suggest(self, query: str = "") -> List[Tag]:
        """Up to ten tags whose name contains ``query`` (case-insensitive)."""
        return list(Tag.objects.filter(name__icontains=query.strip())[:SUGGESTION_LIMIT])

    @BaseService.log_performance
    def create_tag(self, name: str, created_by: str = "") -> ServiceResult[Tag]:
        name = name.strip()
        if not name:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Tag name is required")
        if Tag.objects.filter(name=name).exists():
            return service_err(ErrorCodes.TAG_EXISTS, "Tag already exists")

        try:
            with transaction.atomic():
                tag = Tag.objects.create(name=name, created_by=created_by or "")
        except IntegrityError:
            return service_err(ErrorCodes.TAG_EXISTS, "Tag already exists")
        return service_ok(tag)

    def product_tag_options(self, product_id) -> ServiceResult[List[Dict[str, Any]]]:
        """Tags of a product as ``{value, label}`` options for the tag selector."""
        if not Product.objects.filter(id=product_id).exists():
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

        tags = Tag.objects.filter(product_tags__product_id=product_id).order_by("name")
        return service_ok([{"value": str(tag.id), "label": tag.name} for tag in tags])

# Shared helpers for the artisan backend

from .logging_utils import mask_value, sanitize_payload
from .slugs import slug_base, unique_slug


__all__ = ["mask_value", "sanitize_payload", "slug_base", "unique_slug"]

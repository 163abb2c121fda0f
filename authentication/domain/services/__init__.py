"""
Business logic services for authentication.

Services encapsulate business rules and coordinate between
infrastructure (identity provider) and domain models.
"""

from .user_service import UserService, default_user_slug


__all__ = [
    "UserService",
    "default_user_slug",
]

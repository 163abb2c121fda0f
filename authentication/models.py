from authentication.domain.models.user import User


__all__ = [
    "User",
]

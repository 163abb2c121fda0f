from .profile_views import me, user_by_slug
from .webhook_views import ClerkWebhookView


__all__ = ["ClerkWebhookView", "me", "user_by_slug"]

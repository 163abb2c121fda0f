"""
Clerk session-token authentication for DRF.

Clerk issues RS256 JWTs signed with keys published at the instance JWKS URL.
Signature, expiry and issuer checks are delegated to simplejwt (configured in
``SIMPLE_JWT``); this class only maps the ``sub`` claim to a local User,
creating the row on first use.
"""

import logging

from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from infrastructure.container import container

logger = logging.getLogger(__name__)


class ClerkJWTAuthentication(JWTAuthentication):
    """Authenticate requests bearing a Clerk session token."""

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken(_("Token contained no recognizable user identification"))

        user = container.user_service().ensure_user(str(user_id))

        if not user.is_active:
            logger.warning(f"Inactive user {user_id} presented a valid session token")
            raise AuthenticationFailed(_("User is inactive"), code="user_inactive")

        return user

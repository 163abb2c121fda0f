import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import ErrorResponseSerializer, WebhookAckSerializer
from infrastructure.container import container
from infrastructure.identity import IdentityException
from utils.logging_utils import sanitize_payload
from utils.service_base import error_response

logger = logging.getLogger(__name__)


class ClerkWebhookView(APIView):
    """
    Consume signed user lifecycle events from the identity provider.
    """

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_clerk_webhook",
        summary="Clerk user lifecycle webhook",
        description="""
        Receives `user.created` and `user.deleted` events.

        The raw body is verified against the `svix-id`, `svix-timestamp`
        and `svix-signature` headers before anything is trusted.
        Other event types are acknowledged and ignored.
        """,
        request=None,
        responses={
            200: OpenApiResponse(response=WebhookAckSerializer, description="Event processed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing headers or bad signature"),
        },
        tags=["Webhooks"],
    )
    def post(self, request):
        try:
            event = container.identity().verify_webhook(request.body, request.headers)
        except IdentityException as e:
            logger.warning(f"Rejected Clerk webhook: {str(e)}")
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Clerk webhook {event.event_type}: {sanitize_payload(event.data, ['id'])}")

        result = container.user_service().handle_event(event)
        if not result.ok:
            return error_response(result)

        return Response({"received": True}, status=status.HTTP_200_OK)

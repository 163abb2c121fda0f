from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from payment_system.api.serializers import (
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    ErrorResponseSerializer,
)
from utils.service_base import error_response


@extend_schema(
    operation_id="checkout_create",
    summary="Check out the cart",
    description="""
    Check out a cart of a single payment style.

    **INSTANT carts:** one checkout session per seller on the seller's
    connected account, with the platform fee withheld. ``redirect_url`` is
    set when there is exactly one session; otherwise the client lists the
    sessions.

    **REQUEST carts:** one pending purchase request per line; no payment.

    Amounts are taken from the stored prices, not from the submitted cart.
    """,
    request=CheckoutRequestSerializer,
    responses={
        200: OpenApiResponse(response=CheckoutResponseSerializer, description="Checkout started"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid or mixed cart, missing email"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product or price not found"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Payments - Checkout"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def checkout(request):
    serializer = CheckoutRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = container.checkout_service().checkout(
        request.user,
        serializer.validated_data["items"],
        origin=request.headers.get("Origin", ""),
    )
    if not result.ok:
        return error_response(result)
    return Response(result.value, status=status.HTTP_200_OK)

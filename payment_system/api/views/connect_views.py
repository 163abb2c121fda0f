"""
Stripe Connect views: onboarding, disconnect and revenue insights.
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from payment_system.api.serializers import (
    ConnectRequestSerializer,
    ErrorResponseSerializer,
    InsightsSummarySerializer,
    OnboardingUrlResponseSerializer,
)
from utils.service_base import error_response


@extend_schema(
    operation_id="stripe_connect",
    summary="Connect a payment account",
    description="Creates a connected account, promotes the caller to artisan and returns the onboarding URL.",
    request=ConnectRequestSerializer,
    responses={
        200: OpenApiResponse(response=OnboardingUrlResponseSerializer, description="Onboarding URL"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="No email available"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Payments - Stripe Connect"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def connect(request):
    serializer = ConnectRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = container.connect_service().connect(request.user, email=serializer.validated_data.get("email"))
    if not result.ok:
        return error_response(result)
    return Response({"url": result.value})


@extend_schema(
    operation_id="stripe_onboarding_link",
    summary="Resume onboarding",
    request=None,
    responses={
        200: OpenApiResponse(response=OnboardingUrlResponseSerializer, description="Onboarding URL"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="No account connected"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Payments - Stripe Connect"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def onboarding_link(request):
    result = container.connect_service().onboarding_link(request.user)
    if not result.ok:
        return error_response(result)
    return Response({"url": result.value})


@extend_schema(
    operation_id="stripe_disconnect",
    summary="Disconnect payment account",
    request=None,
    responses={
        200: OpenApiResponse(description="Disconnected"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="No account connected"),
    },
    tags=["Payments - Stripe Connect"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def disconnect(request):
    result = container.connect_service().disconnect(request.user)
    if not result.ok:
        return error_response(result)
    return Response({"success": True})


@extend_schema(
    operation_id="stripe_insights_summary",
    summary="Revenue insights",
    description="Totals over the five most recent charges of the connected account.",
    responses={
        200: OpenApiResponse(response=InsightsSummarySerializer, description="Insights"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="No account connected"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Payments - Stripe Connect"],
)
@api_view(["GET"])
@permission_classes([IsAuthenticated])
def insights_summary(request):
    result = container.connect_service().insights_summary(request.user)
    if not result.ok:
        return error_response(result)
    return Response(result.value)

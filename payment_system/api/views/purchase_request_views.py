from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from payment_system.api.serializers import (
    ApproveResponseSerializer,
    ErrorResponseSerializer,
    PurchaseRequestCreateSerializer,
    PurchaseRequestSerializer,
)
from utils.service_base import error_response


@extend_schema(
    methods=["GET"],
    operation_id="purchase_requests_list",
    summary="List purchase requests",
    description="Requests the caller made or received. Filter with ``?role=buyer`` or ``?role=seller``.",
    parameters=[OpenApiParameter(name="role", type=str, description="buyer or seller")],
    responses={200: OpenApiResponse(response=PurchaseRequestSerializer(many=True), description="Requests")},
    tags=["Payments - Purchase Requests"],
)
@extend_schema(
    methods=["POST"],
    operation_id="purchase_requests_create",
    summary="Request to purchase",
    request=PurchaseRequestCreateSerializer,
    responses={
        201: OpenApiResponse(response=PurchaseRequestSerializer, description="Request created"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Price does not accept requests"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product or price not found"),
    },
    tags=["Payments - Purchase Requests"],
)
@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def purchase_requests(request):
    service = container.purchase_request_service()

    if request.method == "GET":
        requests = service.list_for_user(request.user, role=request.query_params.get("role"))
        return Response(PurchaseRequestSerializer(requests, many=True).data)

    serializer = PurchaseRequestCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    result = service.create(request.user, data["product_id"], data["price_id"], quantity=data["quantity"])
    if not result.ok:
        return error_response(result)
    return Response(PurchaseRequestSerializer(result.value).data, status=status.HTTP_201_CREATED)


@extend_schema(
    operation_id="purchase_requests_approve",
    summary="Approve purchase request (Seller only)",
    description="Moves a PENDING request to APPROVED and opens a checkout session for the buyer.",
    request=None,
    responses={
        200: OpenApiResponse(response=ApproveResponseSerializer, description="Approved"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
        409: OpenApiResponse(response=ErrorResponseSerializer, description="Request is not pending"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Payments - Purchase Requests"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def approve_purchase_request(request, request_id):
    result = container.purchase_request_service().approve(
        request.user, request_id, origin=request.headers.get("Origin", "")
    )
    if not result.ok:
        return error_response(result)

    purchase_request = result.value
    return Response(
        {
            "success": True,
            "checkout_url": purchase_request.checkout_url,
            "request": PurchaseRequestSerializer(purchase_request).data,
        }
    )


@extend_schema(
    operation_id="purchase_requests_reject",
    summary="Reject purchase request (Seller only)",
    request=None,
    responses={
        200: OpenApiResponse(response=PurchaseRequestSerializer, description="Rejected"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the seller"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
        409: OpenApiResponse(response=ErrorResponseSerializer, description="Request is not pending"),
    },
    tags=["Payments - Purchase Requests"],
)
@api_view(["POST"])
@permission_classes([IsAuthenticated])
def reject_purchase_request(request, request_id):
    result = container.purchase_request_service().reject(request.user, request_id)
    if not result.ok:
        return error_response(result)
    return Response(PurchaseRequestSerializer(result.value).data)

"""
Product API Views

Owner-facing product endpoints. All reconciliation with the seller's
connected payment account happens in CatalogService / SyncService; these
views validate the payload, call the service and map failures to HTTP.
"""

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.catalog.api.serializers import (
    ErrorResponseSerializer,
    ProductSerializer,
    ProductTagOptionSerializer,
    ProductWriteSerializer,
    RecentProductSerializer,
    SyncAllResponseSerializer,
    SyncRequestSerializer,
)
from utils.service_base import error_response


logger = logging.getLogger(__name__)


@extend_schema(
    operation_id="products_create",
    summary="Create product with prices",
    description="""
    Create a product and its prices.

    **Connected sellers:** the remote product and prices are created first;
    local rows are written only when every remote call succeeded.

    **Unconnected sellers:** the product is stored locally with placeholder
    prices and can be synced later.
    """,
    request=ProductWriteSerializer,
    responses={
        201: OpenApiResponse(response=ProductSerializer, description="Product created"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a member of a referenced marketplace"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Marketplace not found"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Marketplace - Products"],
)
@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def product_create(request):
    serializer = ProductWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = container.catalog_service().create_product(request.user, serializer.validated_data)
    if not result.ok:
        return error_response(result)

    return Response(ProductSerializer(result.value).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=["GET"],
    operation_id="products_retrieve",
    summary="Get own product",
    responses={
        200: OpenApiResponse(response=ProductSerializer, description="Product details"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not product owner"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
    },
    tags=["Marketplace - Products"],
)
@extend_schema(
    methods=["PUT"],
    operation_id="products_update",
    summary="Update product (Owner only)",
    description="""
    Replace the product's fields and price set.

    Prices carrying an ``id`` are updated in place; prices without one are
    created; existing prices missing from the payload are removed. A changed
    ``unit_amount`` creates a new remote price and deactivates the old one.
    Remote failures do not fail the request; the product is flagged
    ``needs_sync`` instead.
    """,
    request=ProductWriteSerializer,
    responses={
        200: OpenApiResponse(response=ProductSerializer, description="Product updated"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not product owner"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product or price not found"),
    },
    tags=["Marketplace - Products"],
)
@extend_schema(
    methods=["DELETE"],
    operation_id="products_delete",
    summary="Delete product (Owner only)",
    responses={
        204: OpenApiResponse(description="Product deleted"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not product owner"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
    },
    tags=["Marketplace - Products"],
)
@api_view(["GET", "PUT", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def product_detail(request, product_id):
    service = container.catalog_service()

    if request.method == "GET":
        result = service.get_product(request.user, product_id)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data)

    if request.method == "DELETE":
        result = service.delete_product(request.user, product_id)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = ProductWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = service.update_product(request.user, product_id, serializer.validated_data)
    if not result.ok:
        return error_response(result)
    return Response(ProductSerializer(result.value).data)


@extend_schema(
    operation_id="products_tags",
    summary="Tags of a product",
    description="Tags attached to the product as ``{value, label}`` options.",
    responses={
        200: OpenApiResponse(response=ProductTagOptionSerializer(many=True), description="Tag options"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
    },
    tags=["Marketplace - Products"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def product_tags(request, product_id):
    result = container.tag_service().product_tag_options(product_id)
    if not result.ok:
        return error_response(result)
    return Response(result.value)


@extend_schema(
    operation_id="products_sync",
    summary="Force sync a product",
    description="""
    Push a product to the caller's connected payment account.

    The remote product is looked up by its local id before one is created,
    so repeating the call is safe. Remote prices are created for every price
    still on the placeholder. Remote errors are returned; retry manually.
    """,
    request=SyncRequestSerializer,
    responses={
        200: OpenApiResponse(response=ProductSerializer, description="Product synced"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="No connected account"),
        403: OpenApiResponse(response=ErrorResponseSerializer, description="Not product owner"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment provider error"),
    },
    tags=["Marketplace - Sync"],
)
@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def product_sync(request):
    serializer = SyncRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    result = container.sync_service().force_sync(
        request.user,
        data["product_id"],
        name=data.get("name"),
        description=data.get("description"),
    )
    if not result.ok:
        return error_response(result)
    return Response(ProductSerializer(result.value).data)


@extend_schema(
    operation_id="products_sync_all",
    summary="Sync every unsynced product",
    request=None,
    responses={
        200: OpenApiResponse(response=SyncAllResponseSerializer, description="Per-product outcome"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="No connected account"),
    },
    tags=["Marketplace - Sync"],
)
@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def product_sync_all(request):
    result = container.sync_service().sync_all(request.user)
    if not result.ok:
        return error_response(result)
    return Response(result.value)


@extend_schema(
    operation_id="products_recent",
    summary="Recently listed products",
    description="Newest products that have at least one price, each with its most recent price.",
    parameters=[OpenApiParameter(name="limit", type=int, description="Maximum products (default: 20, max: 100)")],
    responses={200: OpenApiResponse(response=RecentProductSerializer(many=True), description="Recent products")},
    tags=["Marketplace - Products"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def recent_products(request):
    try:
        limit = min(max(int(request.query_params.get("limit", 20)), 1), 100)
    except ValueError:
        return Response({"detail": "limit must be an integer"}, status=status.HTTP_400_BAD_REQUEST)

    result = container.listing_service().recent_products(limit=limit)
    if not result.ok:
        return error_response(result)
    return Response(RecentProductSerializer(result.value, many=True).data)

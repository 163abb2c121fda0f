"""
Marketplace API Views

Marketplace creation, lookup and membership.
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.catalog.api.serializers import ErrorResponseSerializer, ProductSerializer
from marketplace.markets.api.serializers import (
    MarketplaceCreateSerializer,
    MarketplaceDetailResponseSerializer,
    MarketplaceSerializer,
    MembershipResponseSerializer,
)
from utils.service_base import error_response


@extend_schema(
    methods=["GET"],
    operation_id="marketplaces_list",
    summary="List marketplaces",
    description="Marketplaces the caller owns or belongs to; ``?scope=all`` lists every marketplace.",
    parameters=[OpenApiParameter(name="scope", type=str, description="``all`` to list every marketplace")],
    responses={200: OpenApiResponse(response=MarketplaceSerializer(many=True), description="Marketplaces")},
    tags=["Marketplace - Marketplaces"],
)
@extend_schema(
    methods=["POST"],
    operation_id="marketplaces_create",
    summary="Create marketplace",
    description="The creator becomes owner and member. The slug is derived from the name.",
    request=MarketplaceCreateSerializer,
    responses={
        201: OpenApiResponse(response=MarketplaceSerializer, description="Marketplace created"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid data"),
    },
    tags=["Marketplace - Marketplaces"],
)
@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def marketplace_list(request):
    service = container.marketplace_service()

    if request.method == "GET":
        if request.query_params.get("scope") == "all":
            marketplaces = service.list_all()
        else:
            marketplaces = service.list_for_user(request.user)
        return Response(MarketplaceSerializer(marketplaces, many=True).data)

    serializer = MarketplaceCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = service.create_marketplace(request.user, serializer.validated_data)
    if not result.ok:
        return error_response(result)
    return Response(MarketplaceSerializer(result.value).data, status=status.HTTP_201_CREATED)


@extend_schema(
    operation_id="marketplaces_retrieve",
    summary="Marketplace page",
    description="Marketplace details, the caller's role in it, and products with a price scoped to it.",
    responses={
        200: OpenApiResponse(response=MarketplaceDetailResponseSerializer, description="Marketplace details"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Marketplace not found"),
    },
    tags=["Marketplace - Marketplaces"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def marketplace_detail(request, slug):
    result = container.marketplace_service().get_by_slug(slug)
    if not result.ok:
        return error_response(result)

    marketplace = result.value
    user = request.user
    authenticated = user.is_authenticated
    products = container.listing_service().marketplace_products(marketplace).value

    return Response(
        {
            "marketplace": MarketplaceSerializer(marketplace).data,
            "is_owner": authenticated and marketplace.is_owner(user),
            "is_member": authenticated and marketplace.is_member(user),
            "products": ProductSerializer(products, many=True).data,
        }
    )


@extend_schema(
    methods=["POST"],
    operation_id="marketplaces_join",
    summary="Join marketplace",
    request=None,
    responses={
        200: OpenApiResponse(response=MembershipResponseSerializer, description="Joined"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Already a member"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Marketplace not found"),
    },
    tags=["Marketplace - Marketplaces"],
)
@extend_schema(
    methods=["DELETE"],
    operation_id="marketplaces_leave",
    summary="Leave marketplace",
    description="Owners cannot leave their marketplace.",
    responses={
        200: OpenApiResponse(response=MembershipResponseSerializer, description="Left"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Owner or not a member"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="Marketplace not found"),
    },
    tags=["Marketplace - Marketplaces"],
)
@api_view(["POST", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def marketplace_membership(request, marketplace_id):
    service = container.marketplace_service()

    if request.method == "POST":
        result = service.join(request.user, marketplace_id)
        message = "Joined marketplace"
    else:
        result = service.leave(request.user, marketplace_id)
        message = "Left marketplace"

    if not result.ok:
        return error_response(result)
    return Response({"detail": message})

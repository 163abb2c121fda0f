from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from authentication.api.serializers import (
    DashboardResponseSerializer,
    ErrorResponseSerializer,
    PublicUserSerializer,
    SellerPageResponseSerializer,
    UserSerializer,
)
from infrastructure.container import container
from marketplace.catalog.api.serializers import ProductSerializer
from marketplace.markets.api.serializers import MarketplaceSerializer
from utils.service_base import error_response


@extend_schema(
    operation_id="auth_dashboard",
    summary="Own dashboard",
    description="""
    The authenticated user's account, their products (newest first) and
    every marketplace they own or belong to.

    The local user row is created on first use if the webhook has not
    arrived yet.
    """,
    responses={200: OpenApiResponse(response=DashboardResponseSerializer, description="Dashboard data")},
    tags=["Profile"],
)
@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def me(request):
    dashboard = container.listing_service().dashboard(request.user).value
    return Response(
        {
            "user": UserSerializer(request.user).data,
            "products": ProductSerializer(dashboard["products"], many=True).data,
            "marketplaces": MarketplaceSerializer(dashboard["marketplaces"], many=True).data,
        },
        status=status.HTTP_200_OK,
    )


@extend_schema(
    operation_id="auth_seller_page",
    summary="Public seller page",
    description="Public profile and products of the user with the given slug.",
    responses={
        200: OpenApiResponse(response=SellerPageResponseSerializer, description="Seller page"),
        404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
    },
    tags=["Profile"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def user_by_slug(request, slug):
    result = container.user_service().get_by_slug(slug)
    if not result.ok:
        return error_response(result)

    user = result.value
    products = container.listing_service().seller_products(user).value
    return Response(
        {
            "user": PublicUserSerializer(user).data,
            "products": ProductSerializer(products, many=True).data,
        },
        status=status.HTTP_200_OK,
    )

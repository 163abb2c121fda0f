from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.catalog.api.serializers import ErrorResponseSerializer, TagCreateSerializer, TagSerializer
from utils.service_base import error_response


@extend_schema(
    methods=["GET"],
    operation_id="tags_suggest",
    summary="Tag suggestions",
    description="Case-insensitive substring match on tag names, at most 10 results.",
    parameters=[OpenApiParameter(name="suggest", type=str, description="Substring to match")],
    responses={200: OpenApiResponse(response=TagSerializer(many=True), description="Matching tags")},
    tags=["Marketplace - Tags"],
)
@extend_schema(
    methods=["POST"],
    operation_id="tags_create",
    summary="Create tag",
    request=TagCreateSerializer,
    responses={
        201: OpenApiResponse(response=TagSerializer, description="Tag created"),
        400: OpenApiResponse(response=ErrorResponseSerializer, description="Tag already exists"),
    },
    tags=["Marketplace - Tags"],
)
@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticatedOrReadOnly])
def tag_list(request):
    service = container.tag_service()

    if request.method == "GET":
        tags = service.suggest(request.query_params.get("suggest", ""))
        return Response(TagSerializer(tags, many=True).data)

    serializer = TagCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = service.create_tag(**serializer.validated_data)
    if not result.ok:
        return error_response(result)
    return Response(TagSerializer(result.value).data, status=status.HTTP_201_CREATED)

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.permissions import IsAdmin
from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.api.utils import resource_location
from apps.common import get_logger
from apps.common.pagination import PageRequest, page_response
from .commands import UserInsertCommand, UserUpdateCommand
from .container import build_user_service
from .serializers import UserInsertSerializer, UserSerializer

logger = get_logger(__name__).bind(component="users", layer="view")

USER_SORT_FIELDS = {"id": "id", "email": "email", "firstName": "first_name"}


@extend_schema(tags=["Users"])
class UserListView(APIView):
    permission_classes = [IsAdmin]
    service = build_user_service()
    log = logger.bind(view="UserListView")

    @extend_schema(
        summary="List users",
        parameters=[
            OpenApiParameter("page", int, required=False),
            OpenApiParameter("size", int, required=False),
            OpenApiParameter("sort", str, required=False, description="field[,asc|desc]"),
        ],
        responses={200: paginated_response(UserSerializer)},
    )
    def get(self, request):
        page_request = PageRequest.from_query_params(
            request.query_params, sortable=USER_SORT_FIELDS
        )
        self.log.debug("Listing users via API", page=page_request.page)
        page = self.service.find_all(page_request)
        return page_response(request, page, UserSerializer)

    @extend_schema(
        summary="Create user",
        request=UserInsertSerializer,
        responses={
            201: UserSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = UserInsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cmd = UserInsertCommand.from_validated(serializer.validated_data)
        self.log.info("Creating user via API", email=cmd.email)
        dto = self.service.insert(cmd)
        return Response(
            UserSerializer(dto).data,
            status=status.HTTP_201_CREATED,
            headers={"Location": resource_location(request, "api-users-detail", dto.id)},
        )


@extend_schema(tags=["Users"])
class UserDetailView(APIView):
    permission_classes = [IsAdmin]
    service = build_user_service()
    log = logger.bind(view="UserDetailView")

    @extend_schema(
        summary="Get user",
        parameters=[OpenApiParameter("user_id", int, OpenApiParameter.PATH)],
        responses={
            200: UserSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, user_id: int):
        self.log.debug("Fetching user detail", user_id=user_id)
        return Response(UserSerializer(self.service.find_by_id(user_id)).data)

    @extend_schema(
        summary="Replace user",
        request=UserSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, user_id: int):
        serializer = UserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Replacing user", user_id=user_id)
        dto = self.service.update(
            user_id, UserUpdateCommand.from_validated(serializer.validated_data)
        )
        return Response(UserSerializer(dto).data)

    @extend_schema(
        summary="Delete user",
        responses={
            204: None,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, user_id: int):
        self.log.info("Deleting user via API", user_id=user_id)
        self.service.delete(user_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

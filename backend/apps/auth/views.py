from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from apps.users.dtos import user_to_dto
from apps.users.serializers import UserSerializer
from .serializers import (
    CatalogTokenObtainPairSerializer,
    DetailResponseSerializer,
    LogoutRequestSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"], summary="Login (JWT obtain pair)")
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = CatalogTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(
    tags=["Auth"], summary="Get current user", responses={200: UserSerializer}
)
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="MeView")

    def get(self, request):
        user = request.user
        self.log.debug("Returning current user profile", user_id=user.id)
        return Response(UserSerializer(user_to_dto(user)).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Logout (blacklist refresh)",
        request=LogoutRequestSerializer,
        responses={
            200: DetailResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = LogoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data["refresh"]).blacklist()
        except TokenError as exc:
            self.log.warning(
                "Logout failed", user_id=request.user.id, error=str(exc)
            )
            return error_response(
                "VALIDATION_ERROR", "Invalid token", {"refresh": [str(exc)]}
            )
        self.log.info("User logged out", user_id=request.user.id)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)

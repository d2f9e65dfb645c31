# users/views.py
import logging

from django.contrib.auth import get_user_model

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated

from rest_framework_simplejwt.tokens import RefreshToken

from drf_spectacular.utils import extend_schema, OpenApiResponse

from core.logging import make_audit_logger
from wallets import ledger

from .serializers import (
    UserSerializer,
    TokenPairSchema,
)

User = get_user_model()
logger = logging.getLogger(__name__)


def _token_pair(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


# ---------------------------
# Register
# ---------------------------
@extend_schema(
    description="Register a new user and return JWT tokens.",
    request=UserSerializer,
    responses={
        201: TokenPairSchema,
        400: OpenApiResponse(description="Validation error"),
    },
)
class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = UserSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        make_audit_logger(user, request)("auth.register")
        logger.info("registered user=%s", user.id)

        return Response(_token_pair(user), status=status.HTTP_201_CREATED)


# ---------------------------
# Me / Dashboard
# ---------------------------
@extend_schema(
    description="Authenticated user dashboard summary.",
    request=None,
    responses={200: OpenApiResponse(description="id, email, date_joined, balance")},
)
class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        return Response(
            {
                "id": user.id,
                "email": user.email,
                "date_joined": user.date_joined,
                "balance": str(ledger.balance(user.id)),
            },
            status=status.HTTP_200_OK,
        )

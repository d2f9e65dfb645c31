# afk/views.py
from django.db import transaction

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from rest_framework.throttling import ScopedRateThrottle, UserRateThrottle

from drf_spectacular.utils import extend_schema, OpenApiResponse

from core.logging import make_audit_logger
from .models import AfkSettings
from .serializers import (
    AfkSessionSerializer,
    AfkSettingsSerializer,
    HeartbeatResponseSerializer,
    StopResponseSerializer,
)
from .sessions import SessionManager


@extend_schema(
    description="Start an AFK earning session for the authenticated user.",
    request=None,
    responses={
        201: AfkSessionSerializer,
        403: OpenApiResponse(description="AFK disabled"),
        409: OpenApiResponse(description="Session already active"),
    },
)
class AfkStartView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        session = SessionManager().start(request.user.id)
        return Response({"session": AfkSessionSerializer(session).data}, status=status.HTTP_201_CREATED)


@extend_schema(
    description="Report presence; credits coins for the time since the previous heartbeat.",
    request=None,
    responses={
        200: HeartbeatResponseSerializer,
        403: OpenApiResponse(description="AFK disabled (session closed)"),
        404: OpenApiResponse(description="No active session"),
        429: OpenApiResponse(description="Heartbeat too frequent"),
    },
)
class AfkHeartbeatView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [UserRateThrottle, ScopedRateThrottle]
    throttle_scope = "afk_heartbeat"

    def post(self, request):
        result = SessionManager().heartbeat(request.user.id)
        return Response({
            "coinsEarned": str(result.coins_earned),
            "dailyCoinsEarned": str(result.daily_coins_earned),
            "limitReached": result.limit_reached,
        }, status=status.HTTP_200_OK)


@extend_schema(
    description="Stop the active AFK session, crediting the final window.",
    request=None,
    responses={200: StopResponseSerializer, 404: OpenApiResponse(description="No active session")},
)
class AfkStopView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        earned = SessionManager().stop(request.user.id)
        return Response({"coinsEarned": str(earned)}, status=status.HTTP_200_OK)


@extend_schema(
    description="Current AFK session (or null) and the AFK settings in effect.",
    request=None,
    responses={200: OpenApiResponse(description="{session, settings}")},
)
class AfkStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        session, config = SessionManager().status(request.user.id)
        return Response({
            "session": AfkSessionSerializer(session).data if session else None,
            "settings": config.public(),
        }, status=status.HTTP_200_OK)


@extend_schema(
    description="Admin-only read/update of AFK settings. Changes apply from the next heartbeat.",
    request=AfkSettingsSerializer,
    responses={200: AfkSettingsSerializer, 400: OpenApiResponse(description="Validation error")},
)
class AfkSettingsView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        return Response(AfkSettingsSerializer(AfkSettings.load()).data, status=status.HTTP_200_OK)

    def patch(self, request):
        serializer = AfkSettingsSerializer(AfkSettings.load(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            obj = serializer.save()
            make_audit_logger(request.user, request)(
                "afk.settings_update",
                enabled=obj.enabled,
                coins_per_minute=str(obj.coins_per_minute),
                max_coins_per_day=str(obj.max_coins_per_day),
            )
        return Response(AfkSettingsSerializer(obj).data, status=status.HTTP_200_OK)

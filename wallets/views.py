from django.conf import settings
from django.db import transaction as db_transaction

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework import status
from rest_framework.pagination import PageNumberPagination

from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiParameter

from core.logging import make_audit_logger
from . import ledger
from .filters import TransactionFilter
from .models import Transaction
from .serializers import (
    TransactionSerializer,
    AdjustSerializer,
)


class HistoryPaginator(PageNumberPagination):
    page_size = settings.COIN_HISTORY_LIMIT
    page_size_query_param = "page_size"
    max_page_size = 100


@extend_schema(
    description="Get the authenticated user's coin balance.",
    request=None,
    responses={200: OpenApiResponse(description="{balance}")},
)
class WalletBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"balance": str(ledger.balance(request.user.id))}, status=status.HTTP_200_OK)


@extend_schema(
    description="List the authenticated user's coin transactions (most recent first).",
    request=None,
    parameters=[
        OpenApiParameter(name="page", required=False, type=int),
        OpenApiParameter(name="page_size", required=False, type=int),
        OpenApiParameter(name="type", required=False, type=str, enum=["credit", "debit"]),
        OpenApiParameter(name="since", required=False, type=str, description="ISO-8601 datetime"),
    ],
    responses={200: TransactionSerializer(many=True)},
)
class TransactionListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        filterset = TransactionFilter(request.query_params, queryset=ledger.history(request.user.id))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

        paginator = HistoryPaginator()
        page = paginator.paginate_queryset(filterset.qs, request)
        serializer = TransactionSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)


@extend_schema(
    description="Admin-only credit or debit of a user's coin balance.",
    request=AdjustSerializer,
    responses={201: TransactionSerializer, 400: OpenApiResponse(description="Validation error")},
)
class AdjustView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = AdjustSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        target = data["user"]
        metadata = {"source": "admin", "admin_id": request.user.id}

        with db_transaction.atomic():
            if data["type"] == Transaction.TYPE_CREDIT:
                result = ledger.credit(target.id, data["amount"], data["description"], metadata)
            else:
                result = ledger.debit(target.id, data["amount"], data["description"], metadata)

            make_audit_logger(request.user, request)(
                "wallet.adjust",
                user_id=target.id,
                type=data["type"],
                amount=str(data["amount"]),
                transaction_id=result.transaction.pk,
            )
        return Response(TransactionSerializer(result.transaction).data, status=status.HTTP_201_CREATED)

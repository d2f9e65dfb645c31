from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiResponse

from .serializers import RedeemRequestSerializer, RedeemResponseSerializer
from .services import redeem


@extend_schema(
    description="Redeem a promotional code for coins (once per user).",
    request=RedeemRequestSerializer,
    responses={200: RedeemResponseSerializer, 400: OpenApiResponse(description="Invalid, expired or used code")},
)
class RedeemView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = RedeemRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = redeem(request.user.id, serializer.validated_data["code"])
        return Response({
            "added": str(result.transaction.amount),
            "balance": str(result.new_balance),
        }, status=status.HTTP_200_OK)

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from drf_spectacular.utils import extend_schema, OpenApiResponse

from .serializers import CoinFlipRequestSerializer, DiceRequestSerializer, GameResponseSerializer
from .services import play_coin_flip, play_dice


def _payload(result):
    return {
        "won": result.won,
        "outcome": result.outcome,
        "payout": str(result.payout),
        "balance": str(result.new_balance),
    }


@extend_schema(
    description="Roll a die against a 1-6 prediction. The stake is debited; a hit pays 5x.",
    request=DiceRequestSerializer,
    responses={200: GameResponseSerializer, 400: OpenApiResponse(description="Invalid bet or insufficient balance")},
)
class DiceView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = DiceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = play_dice(request.user.id, data["stake"], data["prediction"])
        return Response(_payload(result), status=status.HTTP_200_OK)


@extend_schema(
    description="Flip a coin against heads/tails. The stake is debited; a hit pays 1.9x.",
    request=CoinFlipRequestSerializer,
    responses={200: GameResponseSerializer, 400: OpenApiResponse(description="Invalid bet or insufficient balance")},
)
class CoinFlipView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CoinFlipRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = play_coin_flip(request.user.id, data["stake"], data["choice"])
        return Response(_payload(result), status=status.HTTP_200_OK)

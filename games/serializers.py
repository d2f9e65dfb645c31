from rest_framework import serializers

from .services import COIN_SIDES, DICE_FACES


class DiceRequestSerializer(serializers.Serializer):
    stake = serializers.DecimalField(max_digits=14, decimal_places=2)
    prediction = serializers.IntegerField(min_value=1, max_value=DICE_FACES)


class CoinFlipRequestSerializer(serializers.Serializer):
    stake = serializers.DecimalField(max_digits=14, decimal_places=2)
    choice = serializers.ChoiceField(choices=COIN_SIDES)


class GameResponseSerializer(serializers.Serializer):
    won = serializers.BooleanField()
    outcome = serializers.JSONField()
    payout = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)

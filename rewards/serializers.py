from rest_framework import serializers


class RedeemRequestSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)


class RedeemResponseSerializer(serializers.Serializer):
    added = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)

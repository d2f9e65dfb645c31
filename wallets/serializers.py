from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import Transaction

User = get_user_model()


class TransactionSerializer(serializers.ModelSerializer):
    balanceAfter = serializers.DecimalField(source='balance_after', max_digits=14, decimal_places=2)
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Transaction
        fields = ('id', 'type', 'amount', 'description', 'balanceAfter', 'metadata', 'createdAt')
        read_only_fields = fields


class AdjustSerializer(serializers.Serializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    type = serializers.ChoiceField(choices=Transaction.TYPE_CHOICES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(max_length=255, required=False, default="Admin adjustment")

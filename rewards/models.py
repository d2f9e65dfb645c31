from decimal import Decimal

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator


class RedeemCode(models.Model):
    code = models.CharField(max_length=64, unique=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    max_uses = models.PositiveIntegerField(null=True, blank=True, help_text="Empty = unlimited")
    used_count = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        uses = f"{self.used_count}/{self.max_uses}" if self.max_uses is not None else f"{self.used_count}/inf"
        return f"{self.code} +{self.amount} ({uses})"


class Redemption(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="redemptions")
    code = models.ForeignKey(RedeemCode, on_delete=models.CASCADE, related_name="redemptions")
    transaction = models.ForeignKey(
        "wallets.Transaction", on_delete=models.PROTECT, related_name="+", null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "code"], name="uq_redemption_user_code"),
        ]
        indexes = [
            models.Index(fields=["user", "created_at"], name="idx_redemption_user_created"),
        ]

    def __str__(self):
        return f"{self.user_id} redeemed {self.code_id}"

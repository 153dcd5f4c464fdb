from django.conf import settings
from django.db import models

# -------------------------------
# Types, Status & Networks
# -------------------------------
TRANSACTION_TYPES = [
    ("deposit", "Deposit"),
    ("withdrawal", "Withdrawal"),
]

TRANSACTION_STATUS = [
    ("pending", "Pending"),
    ("approved", "Approved"),
    ("rejected", "Rejected"),
]

CURRENCIES = [
    ("TRC20", "USDT (TRC20)"),
    ("BEP20", "USDT (BEP20)"),
]


class WalletTransaction(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="wallet_transactions"
    )
    type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    status = models.CharField(max_length=20, choices=TRANSACTION_STATUS, default="pending")
    currency = models.CharField(max_length=10, choices=CURRENCIES)
    wallet_address = models.CharField(max_length=120)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_wallet_transactions",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    @property
    def is_pending(self):
        return self.status == "pending"

    def __str__(self):
        return f"{self.type} #{self.pk} ({self.user_id}) - ${self.amount:,.2f} - {self.status}"

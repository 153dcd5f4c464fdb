import string

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.crypto import get_random_string

REFERRAL_CODE_LENGTH = 8


def generate_referral_code():
    return get_random_string(REFERRAL_CODE_LENGTH, allowed_chars=string.ascii_lowercase + string.digits)


class User(AbstractUser):
    ROLE_CHOICES = [
        ("user", "User"),
        ("admin", "Admin"),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="user")
    balance = models.DecimalField(max_digits=20, decimal_places=2, default=0)

    referral_code = models.CharField(max_length=20, unique=True, default=generate_referral_code)
    referred_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="referrals",
    )
    referral_bonus = models.DecimalField(max_digits=20, decimal_places=2, default=0)

    def is_admin(self):
        return self.role == "admin" or self.is_superuser

    def __str__(self):
        return f"{self.username} ({self.role})"


TRANSACTION_TYPES = [
    ("deposit", "Deposit"),
    ("withdrawal", "Withdrawal"),
    ("investment", "Investment"),
    ("payout", "Investment Payout"),
    ("referral", "Referral Commission"),
    ("adjustment", "Adjustment"),
]


class BalanceTransaction(models.Model):
    """
    Append-only audit row written for every balance delta.

    A payout row may exist at most once per investment; the constraint is what
    stops a settlement credit from reaching the ledger twice.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="balance_transactions",
    )
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    balance_after = models.DecimalField(max_digits=20, decimal_places=2)
    investment = models.ForeignKey(
        "investments.Investment",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="balance_transactions",
    )
    description = models.TextField(default="N/A")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["investment", "transaction_type"],
                condition=models.Q(transaction_type="payout"),
                name="unique_payout_per_investment",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount:,.2f} ({self.user_id})"


class Notification(models.Model):
    LEVEL_CHOICES = [
        ("success", "Success"),
        ("error", "Error"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    level = models.CharField(max_length=10, choices=LEVEL_CHOICES)
    message = models.TextField()
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"[{self.level}] {self.message}"

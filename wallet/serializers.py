from decimal import Decimal

from rest_framework import serializers

from .models import CURRENCIES, TRANSACTION_TYPES, WalletTransaction


class WalletTransactionSerializer(serializers.ModelSerializer):
    reviewed_by = serializers.CharField(source="reviewed_by.username", read_only=True, default=None)

    class Meta:
        model = WalletTransaction
        fields = [
            "id", "user", "type", "amount", "status", "currency", "wallet_address",
            "reviewed_by", "created_at", "updated_at",
        ]
        read_only_fields = fields


class WalletRequestSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=TRANSACTION_TYPES)
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, min_value=Decimal("0.01"))
    currency = serializers.ChoiceField(choices=CURRENCIES)
    wallet_address = serializers.CharField(max_length=120)


class ReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["approved", "rejected"])

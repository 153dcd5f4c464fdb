from decimal import Decimal

from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import BalanceTransaction, Notification, User
from .services.referrals import find_referrer


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    referral_code = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ["id", "username", "email", "first_name", "password", "referral_code"]

    def validate_referral_code(self, value):
        if not value:
            return None
        referrer = find_referrer(value)
        if referrer is None:
            raise serializers.ValidationError("Invalid referral code.")
        return referrer

    def validate(self, attrs):
        validate_password(attrs["password"], User(username=attrs.get("username"), email=attrs.get("email", "")))
        return attrs

    def create(self, validated_data):
        referrer = validated_data.pop("referral_code", None)
        password = validated_data.pop("password")
        # Registration always provisions a plain user; admins are promoted explicitly.
        user = User(role="user", referred_by=referrer, **validated_data)
        user.set_password(password)
        user.save()
        return user


class UserSerializer(serializers.ModelSerializer):
    referred_by = serializers.CharField(source="referred_by.username", read_only=True, default=None)
    referral_count = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id", "username", "email", "first_name", "role", "balance", "referral_code",
            "referred_by", "referral_bonus", "referral_count", "date_joined",
        ]
        read_only_fields = [
            "id", "username", "email", "balance", "referral_code", "referral_bonus", "date_joined",
        ]

    def get_referral_count(self, obj):
        return obj.referrals.count()


class AdjustBalanceSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate_amount(self, value):
        if value == Decimal("0"):
            raise serializers.ValidationError("Amount must not be zero.")
        return value


class BalanceTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = BalanceTransaction
        fields = ["id", "transaction_type", "amount", "balance_after", "investment", "description", "created_at"]


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ["id", "level", "message", "read", "created_at"]

from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from .models import AccrualPassReport


class InvestmentSerializer(serializers.Serializer):
    """
    Renders a stored Investment or an InvestmentSnapshot; both expose the same attributes.
    """
    id = serializers.IntegerField(read_only=True)
    owner_id = serializers.IntegerField(read_only=True)
    plan_id = serializers.CharField(read_only=True)
    principal = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    guaranteed_payout = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    duration_days = serializers.IntegerField(read_only=True)
    start_time = serializers.DateTimeField(read_only=True)
    maturity_time = serializers.DateTimeField(read_only=True)
    daily_accrual = serializers.DecimalField(max_digits=24, decimal_places=8, read_only=True)
    current_value = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    state = serializers.CharField(read_only=True)
    progress = serializers.SerializerMethodField()

    def get_progress(self, obj):
        principal = float(obj.principal)
        gain = float(obj.guaranteed_payout) - principal
        if gain <= 0:
            return 100.0
        return round((float(obj.current_value) - principal) / gain * 100, 2)


class CreateInvestmentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=20,
        decimal_places=2,
        min_value=Decimal("0.01"),
        max_value=Decimal(str(settings.INVESTMENT_MAX_AMOUNT)),
    )
    duration_days = serializers.IntegerField(
        min_value=1,
        max_value=settings.INVESTMENT_MAX_DURATION_DAYS,
        required=False,
    )
    plan_id = serializers.ChoiceField(choices=[], required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["plan_id"].choices = list(settings.INVESTMENT_PLANS.keys())

    def validate(self, attrs):
        if not attrs.get("plan_id") and not attrs.get("duration_days"):
            raise serializers.ValidationError("Either plan_id or duration_days is required.")
        return attrs


class AccrualPassReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = AccrualPassReport
        fields = [
            "id", "trigger", "started_at", "finished_at", "investments_processed",
            "investments_settled", "total_credited", "failures",
        ]

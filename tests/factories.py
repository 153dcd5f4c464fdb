"""Plain builders shared by the test modules."""
from datetime import datetime, timezone

from investments.services.accrual import InvestmentSnapshot, maturity_for
from users.models import User

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_snapshot(principal=100.0, duration_days=10, start_time=T0, owner_id=1, investment_id=1, **kwargs):
    """Active snapshot with a 2x payout, as create_investment would store it."""
    payout = principal * 2
    fields = dict(
        id=investment_id,
        owner_id=owner_id,
        principal=principal,
        guaranteed_payout=payout,
        duration_days=duration_days,
        start_time=start_time,
        maturity_time=maturity_for(start_time, duration_days),
        daily_accrual=(payout - principal) / duration_days,
        current_value=principal,
    )
    fields.update(kwargs)
    return InvestmentSnapshot(**fields)


def balance_of(user):
    return User.objects.values_list("balance", flat=True).get(pk=user.pk)

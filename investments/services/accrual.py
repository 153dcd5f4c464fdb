"""
Accrual engine.

Pure mapping from (investment, now) to the investment's next state plus the
balance credit it requires, if any. Nothing here touches the database, so the
same snapshot can be advanced any number of times, from any thread.

An active investment grows linearly from its principal toward its guaranteed
payout:

    current_value = min(principal + elapsed_days * daily_accrual, guaranteed_payout)

and settles at the first `now >= maturity_time`, which is also the only point
where a CreditBalance effect is produced.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from investments.exceptions import InconsistentState

ACTIVE = "active"
SETTLED = "settled"

MS_PER_DAY = 86_400_000


@dataclass(frozen=True)
class InvestmentSnapshot:
    """
    Static terms and current value of one investment.

    Amounts are floats: accrual arithmetic is done in floating point and only
    rounded to cents when written back to the store.
    """
    id: Optional[int]
    owner_id: int
    principal: float
    guaranteed_payout: float
    duration_days: int
    start_time: datetime
    maturity_time: datetime
    daily_accrual: float
    current_value: float
    state: str = ACTIVE
    plan_id: str = ""

    @property
    def is_settled(self) -> bool:
        return self.state == SETTLED


@dataclass(frozen=True)
class CreditBalance:
    """Side effect: credit `amount` to `owner_id` for settling `investment_id`."""
    owner_id: int
    amount: float
    investment_id: Optional[int]


@dataclass(frozen=True)
class Advance:
    investment: InvestmentSnapshot
    effect: Optional[CreditBalance] = None


def maturity_for(start_time: datetime, duration_days: int) -> datetime:
    return start_time + timedelta(days=duration_days)


def elapsed_days(start_time: datetime, now: datetime) -> float:
    """Fractional days between two instants, from their millisecond difference."""
    elapsed_ms = (now - start_time).total_seconds() * 1000
    return elapsed_ms / MS_PER_DAY


def value_at(investment: InvestmentSnapshot, now: datetime) -> float:
    """
    Accrued value of an active investment at `now`.

    Clamped to [principal, guaranteed_payout]; the lower clamp only matters if
    a caller passes a `now` earlier than the start time.
    """
    days = elapsed_days(investment.start_time, now)
    value = min(investment.principal + days * investment.daily_accrual, investment.guaranteed_payout)
    return max(value, investment.principal)


def advance(investment: InvestmentSnapshot, now: datetime) -> Advance:
    """
    Compute the next state of `investment` at `now`.

    - settled: returned unchanged, no effect.
    - active and now >= maturity_time: settled at guaranteed_payout, with one
      CreditBalance for the owner. The caller must store the settled state
      before advancing this investment again.
    - active before maturity: current_value recomputed, no effect.
    """
    if investment.state == SETTLED:
        return Advance(investment)

    if investment.state != ACTIVE:
        raise InconsistentState(f"Unknown investment state {investment.state!r}")

    if now >= investment.maturity_time:
        settled = replace(investment, state=SETTLED, current_value=investment.guaranteed_payout)
        credit = CreditBalance(
            owner_id=investment.owner_id,
            amount=investment.guaranteed_payout,
            investment_id=investment.id,
        )
        return Advance(settled, credit)

    return Advance(replace(investment, current_value=value_at(investment, now)))

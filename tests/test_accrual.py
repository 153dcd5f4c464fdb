"""
Unit tests for the accrual engine: linear growth, settlement at maturity and
the single payout credit. No database access.
"""
from dataclasses import replace
from datetime import timedelta

import pytest

from investments.exceptions import InconsistentState
from investments.services.accrual import (
    ACTIVE,
    SETTLED,
    CreditBalance,
    advance,
    elapsed_days,
    maturity_for,
    value_at,
)
from tests.factories import T0, make_snapshot


class TestElapsedDays:

    def test_whole_days(self):
        assert elapsed_days(T0, T0 + timedelta(days=3)) == 3.0

    def test_fractional_days(self):
        assert elapsed_days(T0, T0 + timedelta(hours=36)) == 1.5

    def test_millisecond_resolution(self):
        assert elapsed_days(T0, T0 + timedelta(milliseconds=864)) == pytest.approx(0.00001)


class TestValueAt:

    def test_linear_growth(self):
        investment = make_snapshot()
        assert value_at(investment, T0 + timedelta(days=5)) == 150.0
        assert value_at(investment, T0 + timedelta(days=3)) == pytest.approx(130.0)

    def test_capped_at_guaranteed_payout(self):
        investment = make_snapshot()
        assert value_at(investment, T0 + timedelta(days=25)) == 200.0

    def test_never_below_principal(self):
        investment = make_snapshot()
        assert value_at(investment, T0 - timedelta(days=2)) == 100.0

    def test_monotone_in_time(self):
        investment = make_snapshot(principal=250.0, duration_days=7)
        values = [value_at(investment, T0 + timedelta(hours=h)) for h in range(0, 24 * 8, 5)]
        assert values == sorted(values)
        assert all(250.0 <= v <= 500.0 for v in values)


class TestAdvance:

    def test_before_maturity_updates_value_without_effect(self):
        investment = make_snapshot()
        step = advance(investment, T0 + timedelta(days=3))

        assert step.effect is None
        assert step.investment.state == ACTIVE
        assert step.investment.current_value == pytest.approx(130.0)
        # Static terms are untouched
        assert step.investment.principal == investment.principal
        assert step.investment.maturity_time == investment.maturity_time

    def test_at_maturity_settles_with_one_credit(self):
        investment = make_snapshot(owner_id=7, investment_id=42)
        step = advance(investment, maturity_for(T0, 10))

        assert step.investment.state == SETTLED
        assert step.investment.current_value == 200.0
        assert step.effect == CreditBalance(owner_id=7, amount=200.0, investment_id=42)

    def test_long_after_maturity_credits_payout_not_more(self):
        investment = make_snapshot()
        step = advance(investment, T0 + timedelta(days=400))
        assert step.effect.amount == 200.0
        assert step.investment.current_value == 200.0

    def test_settled_investment_is_unchanged(self):
        settled = advance(make_snapshot(), T0 + timedelta(days=10)).investment

        step = advance(settled, T0 + timedelta(days=30))
        assert step.investment is settled
        assert step.effect is None

    def test_advance_does_not_mutate_input(self):
        investment = make_snapshot()
        advance(investment, T0 + timedelta(days=12))
        assert investment.state == ACTIVE
        assert investment.current_value == 100.0

    def test_same_input_same_output(self):
        investment = make_snapshot()
        now = T0 + timedelta(days=4, hours=6)
        assert advance(investment, now) == advance(investment, now)

    def test_only_first_settling_advance_credits(self):
        investment = make_snapshot()
        credits = []
        for day in range(0, 15):
            step = advance(investment, T0 + timedelta(days=day))
            if step.effect is not None:
                credits.append(step.effect)
            investment = step.investment
        assert len(credits) == 1
        assert investment.state == SETTLED

    def test_unknown_state_is_rejected(self):
        investment = replace(make_snapshot(), state="frozen")
        with pytest.raises(InconsistentState):
            advance(investment, T0 + timedelta(days=1))

from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from investments import tasks
from investments.services.lifecycle import create_investment
from tests.factories import balance_of

pytestmark = pytest.mark.django_db


def long_ago():
    return timezone.now() - timedelta(days=60)


class TestRunAccrualPassCommand:

    def test_settles_matured_investments(self, investor):
        create_investment(investor, 100, duration_days=10, clock=long_ago)
        out = StringIO()

        call_command("run_accrual_pass", stdout=out)

        assert "Total credited: $200.00" in out.getvalue()
        assert balance_of(investor) == Decimal("1100.00")

    def test_unknown_user(self):
        with pytest.raises(CommandError):
            call_command("run_accrual_pass", user="nobody")


class TestScheduler:

    def test_failing_pass_is_logged(self, caplog):
        with mock.patch.object(tasks, "accrue_all", side_effect=RuntimeError("boom")):
            assert tasks.run_accrual() is None
        assert "Accrual pass (schedule) failed" in caplog.text

    def test_starts_once(self, monkeypatch):
        monkeypatch.setattr(tasks, "_scheduler_started", False)
        with mock.patch.object(tasks.threading, "Thread") as thread_cls:
            assert tasks.start_accrual_scheduler(interval_minutes=5) is thread_cls.return_value
            assert tasks.start_accrual_scheduler(interval_minutes=5) is None

        thread_cls.return_value.start.assert_called_once_with()
        assert thread_cls.call_args.kwargs["daemon"] is True

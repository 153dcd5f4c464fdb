from decimal import Decimal

import pytest

from users.models import BalanceTransaction, Notification
from wallet.exceptions import InsufficientFunds, InvalidTransition, NotAllowed, TransactionNotFound, WalletError
from wallet.services import request_deposit, request_withdrawal, review_transaction
from tests.factories import balance_of

pytestmark = pytest.mark.django_db

ADDRESS = "TXq3f1v9yQk2mWZ8a1Lr5JcB7sPpD4eHnV"


class TestRequests:

    def test_deposit_request_is_pending(self, investor):
        tx = request_deposit(investor, "250", "TRC20", ADDRESS)

        assert tx.status == "pending"
        assert tx.amount == Decimal("250.00")
        assert balance_of(investor) == Decimal("1000.00")
        assert Notification.objects.filter(user=investor, level="success").exists()

    def test_non_positive_amount(self, investor):
        with pytest.raises(WalletError):
            request_deposit(investor, 0, "TRC20", ADDRESS)

    def test_withdrawal_over_balance(self, investor):
        with pytest.raises(InsufficientFunds):
            request_withdrawal(investor, "1000.01", "BEP20", ADDRESS)


class TestReview:

    def test_approved_deposit_credits_user_and_referrer(self, make_user, admin_account):
        referrer = make_user("ref")
        user = make_user("newbie", referred_by=referrer)
        tx = request_deposit(user, "100", "TRC20", ADDRESS)

        reviewed = review_transaction(tx.pk, admin_account, approve=True)

        assert reviewed.status == "approved"
        assert reviewed.reviewed_by == admin_account
        assert balance_of(user) == Decimal("100.00")
        assert balance_of(referrer) == Decimal("20.00")
        assert BalanceTransaction.objects.get(user=user).transaction_type == "deposit"

    def test_rejected_deposit_moves_no_money(self, investor, admin_account):
        tx = request_deposit(investor, "100", "TRC20", ADDRESS)

        reviewed = review_transaction(tx.pk, admin_account, approve=False)

        assert reviewed.status == "rejected"
        assert balance_of(investor) == Decimal("1000.00")
        assert Notification.objects.filter(user=investor, level="error").exists()

    def test_approved_withdrawal_debits(self, investor, admin_account):
        tx = request_withdrawal(investor, "400", "BEP20", ADDRESS)
        review_transaction(tx.pk, admin_account, approve=True)
        assert balance_of(investor) == Decimal("600.00")

    def test_withdrawal_no_longer_covered(self, investor, admin_account):
        tx = request_withdrawal(investor, "800", "BEP20", ADDRESS)
        request = request_withdrawal(investor, "700", "BEP20", ADDRESS)
        review_transaction(tx.pk, admin_account, approve=True)

        with pytest.raises(InsufficientFunds):
            review_transaction(request.pk, admin_account, approve=True)

        request.refresh_from_db()
        assert request.status == "pending"
        assert balance_of(investor) == Decimal("200.00")

    def test_review_happens_once(self, investor, admin_account):
        tx = request_deposit(investor, "100", "TRC20", ADDRESS)
        review_transaction(tx.pk, admin_account, approve=True)

        with pytest.raises(InvalidTransition):
            review_transaction(tx.pk, admin_account, approve=True)
        assert balance_of(investor) == Decimal("1100.00")

    def test_only_admins_review(self, investor, make_user):
        tx = request_deposit(investor, "100", "TRC20", ADDRESS)
        with pytest.raises(NotAllowed):
            review_transaction(tx.pk, make_user("mallory"), approve=True)

    def test_unknown_transaction(self, admin_account):
        with pytest.raises(TransactionNotFound):
            review_transaction(424242, admin_account, approve=True)

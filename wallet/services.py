import logging

from django.db import transaction
from django.utils import timezone

from users.exceptions import InsufficientBalance
from users.services.ledger import ZERO, adjust_balance, get_balance, to_money
from users.services.notify import notify_error, notify_success
from users.services.referrals import pay_referral_commission

from .exceptions import InsufficientFunds, InvalidTransition, NotAllowed, TransactionNotFound, WalletError
from .models import WalletTransaction

logger = logging.getLogger(__name__)


def _validated_amount(amount):
    amount = to_money(amount)
    if amount <= ZERO:
        raise WalletError("Amount must be greater than zero.")
    return amount


def request_deposit(user, amount, currency, wallet_address):
    amount = _validated_amount(amount)
    tx = WalletTransaction.objects.create(
        user=user,
        type="deposit",
        amount=amount,
        currency=currency,
        wallet_address=wallet_address,
    )
    logger.info("Deposit #%s of %s requested by user %s", tx.pk, amount, user.pk)
    notify_success(user.pk, "Deposit request submitted successfully")
    return tx


def request_withdrawal(user, amount, currency, wallet_address):
    """
    Record a pending withdrawal. The balance is checked here and again when
    the withdrawal is approved; it is only debited on approval.
    """
    amount = _validated_amount(amount)
    if amount > get_balance(user.pk):
        raise InsufficientFunds()

    tx = WalletTransaction.objects.create(
        user=user,
        type="withdrawal",
        amount=amount,
        currency=currency,
        wallet_address=wallet_address,
    )
    logger.info("Withdrawal #%s of %s requested by user %s", tx.pk, amount, user.pk)
    notify_success(user.pk, "Withdrawal request submitted successfully")
    return tx


def review_transaction(transaction_id, reviewer, approve):
    """
    Approve or reject a pending deposit or withdrawal.

    Approving a deposit credits the user and pays the referral commission;
    approving a withdrawal debits the user. The status change and the balance
    movements commit together, and only a pending transaction can be reviewed,
    so each transaction moves money at most once.
    """
    if reviewer is None or not reviewer.is_authenticated or not reviewer.is_admin():
        raise NotAllowed()

    new_status = "approved" if approve else "rejected"

    try:
        tx = WalletTransaction.objects.select_related("user").get(pk=transaction_id)
    except WalletTransaction.DoesNotExist:
        raise TransactionNotFound()

    with transaction.atomic():
        claimed = WalletTransaction.objects.filter(pk=tx.pk, status="pending").update(
            status=new_status,
            reviewed_by=reviewer,
            updated_at=timezone.now(),
        )
        if not claimed:
            raise InvalidTransition()

        if approve and tx.type == "deposit":
            adjust_balance(tx.user_id, tx.amount, "deposit", description=f"Deposit #{tx.pk} ({tx.currency})")
            pay_referral_commission(tx.user, tx.amount)
        elif approve and tx.type == "withdrawal":
            try:
                adjust_balance(
                    tx.user_id,
                    -tx.amount,
                    "withdrawal",
                    description=f"Withdrawal #{tx.pk} to {tx.wallet_address}",
                    require_funds=True,
                )
            except InsufficientBalance:
                raise InsufficientFunds("The user's balance no longer covers this withdrawal.")

    tx.refresh_from_db()
    logger.info("%s #%s %s by %s", tx.type.capitalize(), tx.pk, new_status, reviewer.username)

    if approve:
        notify_success(tx.user_id, f"Your {tx.type} of ${tx.amount:,.2f} was approved.")
    else:
        notify_error(tx.user_id, f"Your {tx.type} of ${tx.amount:,.2f} was rejected.")
    return tx

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import DecimalField, F, Value
from django.db.models.functions import Greatest

from users.exceptions import InsufficientBalance, UserNotFound
from users.models import BalanceTransaction, User

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(amount):
    """
    Quantize an int, float or Decimal to cents.
    Floats go through str() so 150.0 becomes 150.00 and not its binary expansion.
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENTS)


def get_balance(user_id):
    try:
        return User.objects.values_list("balance", flat=True).get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFound(user_id)


def adjust_balance(user_id, delta, transaction_type, description=None, investment_id=None, require_funds=False):
    """
    Apply a signed delta to a user's balance and return the new balance.

    The update is a single UPDATE ... SET balance = GREATEST(balance + delta, 0)
    so concurrent deposits, withdrawals and payouts never lose each other's
    writes. With `require_funds` a debit only matches while the balance still
    covers it and InsufficientBalance is raised otherwise. The audit row is
    written in the same transaction.
    """
    delta = to_money(delta)
    if description is None:
        description = "N/A"

    with transaction.atomic():
        rows = User.objects.filter(pk=user_id)
        if require_funds and delta < 0:
            rows = rows.filter(balance__gte=-delta)

        updated = rows.update(
            balance=Greatest(
                F("balance") + Value(delta),
                Value(ZERO),
                output_field=DecimalField(max_digits=20, decimal_places=2),
            )
        )
        if not updated:
            if require_funds and User.objects.filter(pk=user_id).exists():
                raise InsufficientBalance(user_id)
            raise UserNotFound(user_id)

        balance_after = User.objects.values_list("balance", flat=True).get(pk=user_id)
        BalanceTransaction.objects.create(
            user_id=user_id,
            transaction_type=transaction_type,
            amount=delta,
            balance_after=balance_after,
            investment_id=investment_id,
            description=description,
        )

    logger.info(
        "Balance of user %s adjusted by %s (%s); new balance %s",
        user_id, delta, transaction_type, balance_after,
    )
    return balance_after

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import F

from users.models import User
from users.services.ledger import adjust_balance, to_money

logger = logging.getLogger(__name__)


def find_referrer(referral_code):
    """
    Return the user owning `referral_code`, or None when no user does.
    """
    if not referral_code:
        return None
    return User.objects.filter(referral_code=referral_code.strip().lower()).first()


def commission_for(amount):
    rate = Decimal(str(settings.REFERRAL_COMMISSION_RATE))
    return to_money(Decimal(str(amount)) * rate)


def pay_referral_commission(user, deposit_amount):
    """
    Credit the referrer of `user` with a commission on an approved deposit.
    Returns the commission paid, or None when the user was not referred.
    """
    referrer_id = user.referred_by_id
    if referrer_id is None:
        return None

    commission = commission_for(deposit_amount)
    if commission <= 0:
        return None

    with transaction.atomic():
        adjust_balance(
            referrer_id,
            commission,
            "referral",
            description=f"Referral commission on deposit by {user.username}",
        )
        User.objects.filter(pk=referrer_id).update(referral_bonus=F("referral_bonus") + commission)

    logger.info("Paid referral commission %s to user %s for %s", commission, referrer_id, user.username)
    return commission

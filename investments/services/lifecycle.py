import logging
import threading
import time
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import DatabaseError, IntegrityError, OperationalError, transaction
from django.utils import timezone

from investments.exceptions import (
    DebitWithoutInvestment,
    InconsistentState,
    InsufficientFunds,
    InvalidInvestmentTerms,
    NotFound,
    TransientStoreFailure,
    Unauthenticated,
)
from investments.models import AccrualPassReport, Investment
from investments.services.accrual import ACTIVE, SETTLED, advance, maturity_for
from users.exceptions import InsufficientBalance, LedgerError, UserNotFound
from users.models import BalanceTransaction, User
from users.services.ledger import ZERO, adjust_balance, get_balance, to_money
from users.services.notify import notify_error, notify_success

logger = logging.getLogger(__name__)

ACCRUAL_PRECISION = Decimal("0.00000001")

# Held while a full accrual pass runs in this process.
_pass_lock = threading.Lock()


# ----------------------------
# Store access
# ----------------------------
def list_by_owner(owner_id):
    return [investment.to_snapshot() for investment in Investment.objects.owned_by(owner_id)]


def get_snapshot(investment_id):
    try:
        return Investment.objects.get(pk=investment_id).to_snapshot()
    except Investment.DoesNotExist:
        raise NotFound(f"Investment #{investment_id} not found.")


def _update(investment_id, filters, **fields):
    """
    Conditional UPDATE of one investment row. Returns the number of rows matched.
    Safe to retry: the filters make a repeated write a no-op.
    """
    retries = max(1, settings.STORE_UPDATE_RETRIES)
    for attempt in range(1, retries + 1):
        try:
            return Investment.objects.filter(pk=investment_id, **filters).update(**fields)
        except OperationalError:
            if attempt == retries:
                logger.exception("Giving up updating investment %s after %s attempts", investment_id, attempt)
                raise TransientStoreFailure()
            logger.warning("Retrying update of investment %s (attempt %s)", investment_id, attempt)
            time.sleep(0.05 * attempt)
        except DatabaseError as exc:
            raise TransientStoreFailure() from exc


# ----------------------------
# Creation
# ----------------------------
def resolve_terms(principal, duration_days=None, plan_id=None):
    """
    Validate and normalise creation input. Returns (principal, duration_days, plan_id).
    """
    try:
        principal = to_money(principal)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInvestmentTerms("Amount must be a number.")
    if not principal.is_finite():
        raise InvalidInvestmentTerms("Amount must be a number.")
    if principal <= ZERO:
        raise InvalidInvestmentTerms("Amount must be greater than zero.")
    max_amount = Decimal(str(settings.INVESTMENT_MAX_AMOUNT))
    if principal > max_amount:
        raise InvalidInvestmentTerms(f"Amount must not exceed ${max_amount:,.2f}.")

    if plan_id:
        plan = settings.INVESTMENT_PLANS.get(plan_id)
        if plan is None:
            raise InvalidInvestmentTerms(f"Unknown investment plan '{plan_id}'.")
        if principal < Decimal(str(plan["min_amount"])):
            raise InvalidInvestmentTerms(
                f"The {plan['name']} plan requires at least ${plan['min_amount']:,}."
            )
        duration_days = plan["duration_days"]

    try:
        duration_days = int(duration_days)
    except (TypeError, ValueError):
        raise InvalidInvestmentTerms("Duration must be a whole number of days.")
    if duration_days <= 0:
        raise InvalidInvestmentTerms("Duration must be at least one day.")
    if duration_days > settings.INVESTMENT_MAX_DURATION_DAYS:
        raise InvalidInvestmentTerms(
            f"Duration must not exceed {settings.INVESTMENT_MAX_DURATION_DAYS} days."
        )

    return principal, duration_days, plan_id or ""


def create_investment(user, principal, duration_days=None, plan_id=None, clock=timezone.now):
    """
    Debit the principal from `user` and store a new active investment.

    Validation failures (Unauthenticated, InvalidInvestmentTerms,
    InsufficientFunds) leave balance and store untouched. The debit happens
    before the insert; if the insert then fails, DebitWithoutInvestment is
    raised and the user is notified so the amount can be restored.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthenticated()

    principal, duration_days, plan_id = resolve_terms(principal, duration_days, plan_id)

    try:
        balance = get_balance(user.pk)
    except UserNotFound:
        raise Unauthenticated()
    if principal > balance:
        raise InsufficientFunds()

    now = clock()
    try:
        maturity_time = maturity_for(now, duration_days)
    except OverflowError:
        raise InvalidInvestmentTerms("Duration is too long.")
    guaranteed_payout = principal * settings.PAYOUT_MULTIPLIER
    daily_accrual = ((guaranteed_payout - principal) / duration_days).quantize(ACCRUAL_PRECISION)

    try:
        adjust_balance(
            user.pk,
            -principal,
            "investment",
            description=f"Investment of ${principal:,.2f} for {duration_days} days",
            require_funds=True,
        )
    except InsufficientBalance:
        raise InsufficientFunds()
    except UserNotFound:
        raise Unauthenticated()
    except DatabaseError as exc:
        raise TransientStoreFailure() from exc

    try:
        investment = Investment.objects.create(
            owner_id=user.pk,
            plan_id=plan_id,
            principal=principal,
            guaranteed_payout=guaranteed_payout,
            duration_days=duration_days,
            start_time=now,
            maturity_time=maturity_time,
            daily_accrual=daily_accrual,
            current_value=principal,
            state=ACTIVE,
        )
    except DatabaseError as exc:
        logger.error(
            "Debited %s from user %s but could not store the investment",
            principal, user.pk, exc_info=True,
        )
        error = DebitWithoutInvestment(user_id=user.pk, amount=principal)
        notify_error(user.pk, error.message)
        raise error from exc

    logger.info(
        "Investment #%s created for user %s: principal %s, payout %s, %s days",
        investment.pk, user.pk, principal, guaranteed_payout, duration_days,
    )
    notify_success(user.pk, "Investment created successfully")
    return investment


# ----------------------------
# Accrual
# ----------------------------
def _persist_accrual(previous, updated):
    value = to_money(updated.current_value)
    if value <= to_money(previous.current_value):
        return updated

    matched = _update(
        updated.id,
        {"state": ACTIVE, "current_value__lt": value},
        current_value=value,
        updated_at=timezone.now(),
    )
    if matched:
        return updated

    # Settled or moved further by a concurrent pass; the store wins.
    return get_snapshot(updated.id)


def settle(settled, credit, now):
    """
    Store the settled state of an investment and credit its payout, as one unit.

    The state change is a conditional UPDATE ... WHERE state = 'active', so of
    two passes racing on the same investment only one matches a row; the other
    returns the stored snapshot without crediting. The credit runs in the same
    database transaction, so a failed credit rolls the settlement back and the
    next pass retries it.
    """
    if settled.state != SETTLED or credit.investment_id != settled.id:
        raise InconsistentState(f"Investment #{settled.id} is not ready for settlement.")

    amount = to_money(credit.amount)
    try:
        with transaction.atomic():
            claimed = Investment.objects.filter(pk=settled.id, state=ACTIVE).update(
                state=SETTLED,
                current_value=amount,
                settled_at=now,
                updated_at=timezone.now(),
            )
            if not claimed:
                stored = get_snapshot(settled.id)
                logger.info("Investment #%s already settled by another pass; no credit issued", settled.id)
                return stored

            if BalanceTransaction.objects.filter(investment_id=settled.id, transaction_type="payout").exists():
                raise InconsistentState(f"Investment #{settled.id} has already been credited.")

            adjust_balance(
                credit.owner_id,
                amount,
                "payout",
                description=f"Payout of investment #{settled.id}",
                investment_id=settled.id,
            )
    except IntegrityError as exc:
        raise InconsistentState(f"Investment #{settled.id} has already been credited.") from exc
    except DatabaseError as exc:
        raise TransientStoreFailure() from exc

    logger.info("Investment #%s settled; credited %s to user %s", settled.id, amount, credit.owner_id)
    notify_success(credit.owner_id, f"Your investment #{settled.id} matured: ${amount:,.2f} credited to your balance.")
    return settled


def _run(snapshots, now):
    owner_ids = {snapshot.owner_id for snapshot in snapshots if snapshot.state == ACTIVE}
    resolvable = set(User.objects.filter(pk__in=owner_ids).values_list("pk", flat=True))

    results = []
    credited = []
    failures = 0
    for snapshot in snapshots:
        if snapshot.state != ACTIVE or snapshot.owner_id not in resolvable:
            results.append(snapshot)
            continue

        try:
            step = advance(snapshot, now)
            if step.effect is not None:
                outcome = settle(step.investment, step.effect, now)
                if outcome is step.investment:
                    credited.append(to_money(step.effect.amount))
                results.append(outcome)
            else:
                results.append(_persist_accrual(snapshot, step.investment))
        except InconsistentState as exc:
            failures += 1
            logger.error("Aborted settlement of investment #%s: %s", snapshot.id, exc.message)
            results.append(snapshot)
        except (TransientStoreFailure, LedgerError, NotFound) as exc:
            failures += 1
            logger.warning("Could not advance investment #%s: %s", snapshot.id, exc)
            if now >= snapshot.maturity_time:
                notify_error(
                    snapshot.owner_id,
                    f"Your investment #{snapshot.id} has matured but could not be paid out yet. "
                    "It will be retried automatically.",
                )
            results.append(snapshot)

    return results, failures, credited


def run_accrual_pass(investments, now=None):
    """
    Advance every active investment with a known owner to `now`, store what
    changed and credit the payout of those that matured.

    `investments` is a sequence of InvestmentSnapshot; the returned list has
    the same order and length, settled and unowned snapshots passed through.
    """
    if now is None:
        now = timezone.now()
    results, _, _ = _run(list(investments), now)
    return results


def refresh_investments(user, now=None):
    """
    Current snapshots of a user's investments, after advancing them to `now`.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthenticated()
    return run_accrual_pass(list_by_owner(user.pk), now=now)


def accrue_all(trigger="schedule", now=None, owner_id=None):
    """
    Run one accrual pass over all active investments and store a report.

    Passes in one process are serialised: if a pass is still running this one
    is skipped and None is returned.
    """
    if not _pass_lock.acquire(blocking=False):
        logger.warning("Accrual pass (%s) skipped: previous pass still running", trigger)
        return None

    try:
        started_at = timezone.now()
        if now is None:
            now = started_at

        active = Investment.objects.active()
        if owner_id is not None:
            active = active.filter(owner_id=owner_id)
        snapshots = [investment.to_snapshot() for investment in active]

        _, failures, credited = _run(snapshots, now)

        report = AccrualPassReport.objects.create(
            trigger=trigger,
            started_at=started_at,
            finished_at=timezone.now(),
            investments_processed=len(snapshots),
            investments_settled=len(credited),
            total_credited=sum(credited, ZERO),
            failures=failures,
        )
    finally:
        _pass_lock.release()

    logger.info(
        "Accrual pass (%s): processed %s investments, settled %s, credited $%s, %s failures",
        trigger, report.investments_processed, report.investments_settled,
        f"{report.total_credited:,.2f}", report.failures,
    )
    return report

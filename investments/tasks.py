import logging
import threading
import time

import schedule
from django.conf import settings

from investments.services.lifecycle import accrue_all

logger = logging.getLogger(__name__)

_scheduler_started = False


def run_accrual(trigger="schedule"):
    """
    Run one accrual pass for every active investment.
    Errors are logged so a failing pass does not stop the scheduler thread.
    """
    try:
        return accrue_all(trigger=trigger)
    except Exception:
        logger.exception("Accrual pass (%s) failed", trigger)
        return None


def start_accrual_scheduler(interval_minutes=None):
    """
    Run `run_accrual` once now and then every `interval_minutes`
    (ACCRUAL_INTERVAL_MINUTES by default) in a daemon thread.
    """
    global _scheduler_started
    if _scheduler_started:
        return None
    _scheduler_started = True

    if interval_minutes is None:
        interval_minutes = settings.ACCRUAL_INTERVAL_MINUTES

    scheduler = schedule.Scheduler()
    scheduler.every(interval_minutes).minutes.do(run_accrual)

    # Run scheduler in a separate thread so it doesn't block Django
    def run_scheduler():
        run_accrual(trigger="startup")
        while True:
            scheduler.run_pending()
            time.sleep(30)

    scheduler_thread = threading.Thread(target=run_scheduler, name="accrual-scheduler", daemon=True)
    scheduler_thread.start()
    logger.info("Accrual scheduler started (every %s minutes).", interval_minutes)
    return scheduler_thread

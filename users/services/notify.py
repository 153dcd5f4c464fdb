"""
Fire-and-forget user notifications.

Messages are stored so the frontend can show them, and logged. Failing to
store one is logged and otherwise ignored: a notification must never undo or
interrupt the operation it reports on.
"""
import logging

from django.db import DatabaseError, transaction

from users.models import Notification

logger = logging.getLogger(__name__)


def notify_success(user_id, message):
    _notify(user_id, "success", message)


def notify_error(user_id, message):
    _notify(user_id, "error", message)


def _notify(user_id, level, message):
    if level == "error":
        logger.warning("Notify user %s: %s", user_id, message)
    else:
        logger.info("Notify user %s: %s", user_id, message)

    if user_id is None:
        return

    try:
        with transaction.atomic():
            Notification.objects.create(user_id=user_id, level=level, message=message)
    except DatabaseError:
        logger.exception("Could not store %s notification for user %s", level, user_id)

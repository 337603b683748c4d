"""
Notification fan-out and recipient-scoped read-state operations.

Every read-state operation filters on user=requester, so touching someone
else's notification is indistinguishable from touching a missing one.
"""

import logging

from django.db import transaction

from .exceptions import NotFound
from .models import Notification
from .queries import paginate

logger = logging.getLogger(__name__)


def on_answer_created(question, answer):
    """
    Tell the question author about a new answer.

    Fire-and-forget: runs in its own savepoint and never raises, so a failed
    notification cannot undo or fail the answer that triggered it.
    """
    if question.author_id == answer.author_id:
        return None
    try:
        with transaction.atomic():
            notification = Notification.objects.create(
                user_id=question.author_id,
                actor_id=answer.author_id,
                question=question,
                message=f'Your question "{question.title}" received a new answer!'[:300],
            )
    except Exception:
        logger.exception(f"Could not notify user {question.author_id} about answer {answer.id}")
        return None
    logger.info(f"Notified user {question.author_id} about answer {answer.id}")
    return notification


def _get_own(user, notification_id):
    try:
        return user.notifications.get(id=notification_id)
    except Notification.DoesNotExist:
        raise NotFound("Notification not found.")


def list_notifications(user, params, unread_only=False):
    queryset = user.notifications.all()
    if unread_only:
        queryset = queryset.unread()
    return paginate(queryset.order_by("-created_at", "-id"), params)


def mark_read(user, notification_id):
    notification = _get_own(user, notification_id)
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read", "updated_at"])
    return notification


def mark_all_read(user):
    return user.notifications.mark_all_as_read()


def delete_notification(user, notification_id):
    _get_own(user, notification_id).delete()


def delete_all(user):
    deleted, _ = user.notifications.all().delete()
    return deleted


def unread_count(user):
    return user.notifications.unread().count()

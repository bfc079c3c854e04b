"""
Notification service

Notifications are written by other services as side effects (a reply to a
comment, a review of an error report) and read back by their recipient.
"""
import logging
from datetime import timedelta

from exceptions import NotFoundException
from repositories.notification_repository import NotificationRepository
from utils import now_utc

logger = logging.getLogger("main")


def notify(user_id, notification_type, title, message, data=None):
    notification = NotificationRepository.create(
        user_id=user_id, type=notification_type, title=title, message=message, data_json=data or {}
    )
    logger.debug(f"Notification {notification.id} ({notification_type}) stored for user {user_id}")
    return notification


def _owned(user_id, notification_id):
    notification = NotificationRepository.get_for_user(notification_id, user_id)
    if notification is None:
        raise NotFoundException("Notification", notification_id)
    return notification


def mark_read(user_id, notification_id):
    return NotificationRepository.mark_read(_owned(user_id, notification_id))


def mark_all_read(user_id):
    return NotificationRepository.mark_all_read(user_id)


def delete_notification(user_id, notification_id):
    return NotificationRepository.delete(_owned(user_id, notification_id))


def cleanup(retention_days):
    """Drop notifications older than retention_days; returns how many went"""
    deleted = NotificationRepository.delete_older_than(now_utc() - timedelta(days=retention_days))
    logger.info(f"Removed {deleted} notifications older than {retention_days} days")
    return deleted

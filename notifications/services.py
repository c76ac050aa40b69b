# ==================== NOTIFICATIONS/SERVICES.PY ====================
import logging
from django.db import transaction
from .models import Notification

logger = logging.getLogger(__name__)


def notify(user_id, type, title, message, data=None):
    """Store a notification and queue its email once the surrounding transaction commits"""
    notification = Notification.objects.create(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
    )
    logger.info(f"Notification {notification.id} ({type}) queued for user {user_id}: {title}")

    from .tasks import deliver_notification
    transaction.on_commit(lambda: deliver_notification.delay(notification.id))
    return notification

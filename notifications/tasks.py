# ==================== NOTIFICATIONS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
import logging

logger = logging.getLogger(__name__)


@shared_task
def deliver_notification(notification_id):
    """Email a stored notification to its user"""
    from .models import Notification

    try:
        notification = Notification.objects.select_related('user').get(id=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} no longer exists")
        return

    if notification.email_sent or not notification.user.email:
        return

    try:
        send_mail(
            notification.title,
            notification.message,
            settings.DEFAULT_FROM_EMAIL,
            [notification.user.email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Error sending notification {notification_id}: {str(e)}")
        return

    notification.email_sent = True
    notification.save(update_fields=['email_sent'])

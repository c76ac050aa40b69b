# ==================== BOOKINGS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.utils import timezone
import logging

from utils.exceptions import InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)


@shared_task
def auto_complete_bookings():
    """Complete confirmed bookings whose end time has passed"""
    from .models import Booking
    from .services import BookingService

    now = timezone.now()
    ended = Booking.objects.filter(
        status=Booking.CONFIRMED,
        end_datetime__lte=now,
    ).values_list('id', flat=True)

    completed = 0
    for booking_id in list(ended):
        try:
            BookingService.complete(booking_id, now=now)
            completed += 1
        except (InvalidStateError, NotFoundError) as e:
            # cancelled or removed since the query ran
            logger.warning(f"Skipping completion of booking {booking_id}: {e.detail}")

    logger.info(f"Auto-completed {completed} bookings")
    return completed

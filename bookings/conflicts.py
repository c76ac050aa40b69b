# ==================== BOOKINGS/CONFLICTS.PY ====================
from django.conf import settings

from parking.availability import AvailabilityService
from utils.intervals import TimeInterval
from .models import Booking


class ConflictResult:
    def __init__(self, conflicting_booking_ids=None, unavailable_hours=None):
        self.conflicting_booking_ids = list(conflicting_booking_ids or [])
        self.unavailable_hours = list(unavailable_hours or [])

    @property
    def conflict(self):
        return bool(self.conflicting_booking_ids or self.unavailable_hours)

    def __bool__(self):
        return self.conflict

    def __repr__(self):
        return (f"ConflictResult(conflict={self.conflict}, bookings={self.conflicting_booking_ids}, "
                f"unavailable_hours={len(self.unavailable_hours)})")

    def to_dict(self):
        if not self.conflict:
            return {'conflict': False}
        return {
            'conflict': True,
            'conflicting_booking_ids': self.conflicting_booking_ids,
            'unavailable_hours': [
                {'date': day.isoformat(), 'hour': hour} for day, hour in self.unavailable_hours
            ],
        }


class ConflictDetector:
    """Find bookings and closed hours that collide with a proposed interval

    This is a plain read. Callers must run it inside the same transaction
    that inserts the booking, with the parking space row locked.
    """

    @staticmethod
    def enforce_availability():
        return getattr(settings, 'BOOKING_ENFORCE_AVAILABILITY', True)

    @staticmethod
    def overlapping_bookings(space_id, interval, exclude_booking_id=None):
        bookings = Booking.objects.filter(
            parking_space_id=space_id,
            start_datetime__lt=interval.end,
            end_datetime__gt=interval.start,
        ).exclude(status=Booking.CANCELLED)

        if exclude_booking_id is not None:
            bookings = bookings.exclude(pk=exclude_booking_id)
        return bookings

    @classmethod
    def check(cls, space_id, start_datetime, end_datetime, exclude_booking_id=None):
        interval = TimeInterval(start_datetime, end_datetime)
        booking_ids = list(
            cls.overlapping_bookings(space_id, interval, exclude_booking_id)
            .order_by('start_datetime')
            .values_list('id', flat=True)
        )

        unavailable_hours = []
        if cls.enforce_availability():
            unavailable_hours = AvailabilityService.blocked_hours(space_id, interval)

        return ConflictResult(booking_ids, unavailable_hours)

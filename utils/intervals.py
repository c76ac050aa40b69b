# ==================== UTILS/INTERVALS.PY ====================
from datetime import timedelta

from django.utils import timezone

from .exceptions import ValidationError

HOURS_PER_DAY = 24


class TimeInterval:
    """Half-open time range [start, end)"""

    def __init__(self, start, end):
        if start is None or end is None:
            raise ValidationError('Start and end time are required')
        if start >= end:
            raise ValidationError('End time must be after start time')
        self.start = start
        self.end = end

    def __eq__(self, other):
        if not isinstance(other, TimeInterval):
            return NotImplemented
        return self.start == other.start and self.end == other.end

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        return f"TimeInterval({self.start.isoformat()}, {self.end.isoformat()})"

    @property
    def duration(self):
        return self.end - self.start

    def overlaps(self, other):
        return overlaps(self, other)

    def contains(self, moment):
        return self.start <= moment < self.end

    def hour_buckets(self, tz=None):
        """Yield every (date, hour) this interval touches in the given time zone"""
        aware = timezone.is_aware(self.start)
        if aware:
            cursor = timezone.localtime(self.start, tz)
        else:
            cursor = self.start
        cursor = cursor.replace(minute=0, second=0, microsecond=0)

        while cursor < self.end:
            yield cursor.date(), cursor.hour
            cursor = cursor + timedelta(hours=1)
            if aware:
                cursor = timezone.localtime(cursor, tz)


class HourRange:
    """Hour range [start_hour, end_hour) within one calendar day, tagged with availability"""

    def __init__(self, start_hour, end_hour, is_available=True):
        start_hour = int(start_hour)
        end_hour = int(end_hour)
        if not 0 <= start_hour < HOURS_PER_DAY or not 0 < end_hour <= HOURS_PER_DAY:
            raise ValidationError(f'Hour range {start_hour}-{end_hour} is outside the day')
        if start_hour >= end_hour:
            raise ValidationError('End hour must be after start hour')
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.is_available = bool(is_available)

    def __eq__(self, other):
        if not isinstance(other, HourRange):
            return NotImplemented
        return (self.start_hour, self.end_hour, self.is_available) == (
            other.start_hour, other.end_hour, other.is_available
        )

    def __repr__(self):
        return f"HourRange({self.start_hour}, {self.end_hour}, {self.is_available})"

    @property
    def start(self):
        return self.start_hour

    @property
    def end(self):
        return self.end_hour

    @property
    def is_full_day(self):
        return self.start_hour == 0 and self.end_hour == HOURS_PER_DAY

    def contains_hour(self, hour):
        return contains_hour(self, hour)

    def to_dict(self):
        return {
            'start_hour': self.start_hour,
            'end_hour': self.end_hour,
            'is_available': self.is_available,
        }


def overlaps(a, b):
    """Half-open overlap test; touching endpoints do not overlap"""
    return a.start < b.end and b.start < a.end


def contains_hour(hour_range, hour):
    return hour_range.start_hour <= hour < hour_range.end_hour

# ==================== PARKING/AVAILABILITY.PY ====================
import calendar
import logging
from collections import defaultdict
from datetime import date as date_cls, datetime, timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from utils.exceptions import ValidationError, NotFoundError
from utils.intervals import HourRange, HOURS_PER_DAY
from .models import ParkingSpace, AvailabilitySlot

logger = logging.getLogger(__name__)

DAY_AVAILABLE = 'available'
DAY_UNAVAILABLE = 'unavailable'
DAY_PARTIAL = 'partial'


def default_open():
    """Availability of an hour that has no stored slot"""
    return getattr(settings, 'AVAILABILITY_DEFAULT_OPEN', True)


class DaySchedule:
    """Normalized availability of one calendar day

    Slots never overlap and adjacent slots with the same availability are
    merged. Later slots win when the input overlaps, so legacy rows written
    by hour toggles collapse into a consistent set.
    """

    def __init__(self, slots=None):
        self._slots = self._normalize(slots or [])

    def __eq__(self, other):
        if not isinstance(other, DaySchedule):
            return NotImplemented
        return self._slots == other._slots

    def __len__(self):
        return len(self._slots)

    def __repr__(self):
        return f"DaySchedule({self._slots!r})"

    @classmethod
    def from_hours(cls, hours):
        """Build from a {hour: bool} mapping, hour keys may be strings"""
        slots = []
        for hour, is_available in hours.items():
            try:
                hour = int(hour)
            except (TypeError, ValueError):
                raise ValidationError(f'Invalid hour: {hour}')
            slots.append(HourRange(hour, hour + 1, bool(is_available)))
        return cls(slots)

    @classmethod
    def from_availability(cls, day):
        """Build from a DayAvailability payload {"available": bool, "hours": {...}}

        Listed hours take precedence over "available", which then only has to
        agree with them: a closed day cannot open hours, and an open day must
        keep an hour open when all 24 are listed.
        """
        if isinstance(day, DaySchedule):
            return day
        if not isinstance(day, dict):
            raise ValidationError('Day availability must be an object')
        hours = day.get('hours')
        if hours:
            schedule = cls.from_hours(hours)
            if 'available' in day:
                any_open = any(slot.is_available for slot in schedule.slots)
                all_listed = all(schedule.hour_value(hour) is not None for hour in range(HOURS_PER_DAY))
                if (not day['available'] and any_open) or (day['available'] and all_listed and not any_open):
                    raise ValidationError('"available" contradicts the listed hours')
            return schedule
        if 'available' in day:
            return cls([HourRange(0, HOURS_PER_DAY, bool(day['available']))])
        return cls()

    @staticmethod
    def _normalize(slots):
        grid = [None] * HOURS_PER_DAY
        for slot in slots:
            for hour in range(slot.start_hour, slot.end_hour):
                grid[hour] = slot.is_available

        normalized = []
        run_start = 0
        for hour in range(1, HOURS_PER_DAY + 1):
            if hour < HOURS_PER_DAY and grid[hour] == grid[run_start]:
                continue
            if grid[run_start] is not None:
                normalized.append(HourRange(run_start, hour, grid[run_start]))
            run_start = hour
        return normalized

    @property
    def slots(self):
        return list(self._slots)

    def hour_value(self, hour):
        """Explicit availability of an hour, None when no slot covers it"""
        for slot in self._slots:
            if slot.contains_hour(hour):
                return slot.is_available
        return None

    def is_hour_available(self, hour, default=True):
        value = self.hour_value(hour)
        return default if value is None else value

    def set_day(self, available):
        self._slots = [HourRange(0, HOURS_PER_DAY, available)]
        return self

    def set_hour(self, hour, available):
        _check_hour(hour)
        # splits the covering slot, then re-merges neighbours
        self._slots = self._normalize(self._slots + [HourRange(hour, hour + 1, available)])
        return self

    def toggle_hour(self, hour, available=None):
        """Set one hour; without a value, flip it (an uncovered hour becomes available)"""
        if available is None:
            current = self.hour_value(hour)
            available = True if current is None else not current
        return self.set_hour(hour, available)

    def status(self):
        if not self._slots or not any(slot.is_available for slot in self._slots):
            return DAY_UNAVAILABLE
        if len(self._slots) == 1 and self._slots[0].is_full_day:
            return DAY_AVAILABLE
        return DAY_PARTIAL

    def hours(self, default=True):
        return {hour: self.is_hour_available(hour, default) for hour in range(HOURS_PER_DAY)}

    def to_availability(self, default=True):
        hours = self.hours(default)
        return {
            'available': any(hours.values()),
            'hours': hours,
        }


class AvailabilityService:
    """Stored hour-level availability of parking spaces"""

    @staticmethod
    def get_day(space_id, day):
        slots = AvailabilitySlot.objects.filter(parking_space_id=space_id, date=day)
        return DaySchedule([_slot_range(slot) for slot in slots])

    @staticmethod
    def get_month(space_id, year, month):
        """Dense calendar of a month: {date: {"available": bool, "hours": {0..23: bool}}}"""
        _get_space(space_id)
        first_day, last_day = month_bounds(year, month)
        schedules = _load_schedules(space_id, first_day, last_day)
        default = default_open()

        return {
            day: schedules.get(day, DaySchedule()).to_availability(default)
            for day in _each_day(first_day, last_day)
        }

    @staticmethod
    def month_status(space_id, year, month):
        _get_space(space_id)
        first_day, last_day = month_bounds(year, month)
        schedules = _load_schedules(space_id, first_day, last_day)
        return {
            day: schedules.get(day, DaySchedule()).status()
            for day in _each_day(first_day, last_day)
        }

    @staticmethod
    def replace_month(space_id, year, month, availability):
        """Replace every slot of the month in a single transaction"""
        first_day, last_day = month_bounds(year, month)

        schedules = {}
        for key, day in (availability or {}).items():
            day_date = to_date(key)
            if not first_day <= day_date <= last_day:
                raise ValidationError(f'{day_date.isoformat()} is outside {first_day:%Y-%m}')
            schedules[day_date] = DaySchedule.from_availability(day)

        new_slots = [
            _slot_row(space_id, day_date, slot)
            for day_date, schedule in sorted(schedules.items())
            for slot in schedule.slots
        ]

        with transaction.atomic():
            _lock_space(space_id)
            deleted, _ = AvailabilitySlot.objects.filter(
                parking_space_id=space_id,
                date__gte=first_day,
                date__lte=last_day,
            ).delete()
            AvailabilitySlot.objects.bulk_create(new_slots)

        logger.info(f"Availability for space {space_id} {first_day:%Y-%m} replaced: "
                    f"{deleted} slots removed, {len(new_slots)} slots stored")

    @staticmethod
    def toggle_day(space_id, day, available):
        day = to_date(day)
        with transaction.atomic():
            _lock_space(space_id)
            schedule = DaySchedule().set_day(bool(available))
            _save_day(space_id, day, schedule)
        return schedule.to_availability(default_open())

    @staticmethod
    def toggle_hour(space_id, day, hour, available=None):
        day = to_date(day)
        hour = _check_hour(hour)
        with transaction.atomic():
            _lock_space(space_id)
            schedule = AvailabilityService.get_day(space_id, day)
            schedule.toggle_hour(hour, available)
            _save_day(space_id, day, schedule)
        return schedule.to_availability(default_open())

    @staticmethod
    def blocked_hours(space_id, interval, tz=None):
        """(date, hour) pairs of the interval that are not open for booking"""
        buckets = list(interval.hour_buckets(tz or timezone.get_current_timezone()))
        if not buckets:
            return []
        schedules = _load_schedules(space_id, buckets[0][0], buckets[-1][0])
        default = default_open()

        return [
            (day, hour) for day, hour in buckets
            if not schedules.get(day, DaySchedule()).is_hour_available(hour, default)
        ]


def month_bounds(year, month):
    try:
        year, month = int(year), int(month)
        last = calendar.monthrange(year, month)[1]
        return date_cls(year, month, 1), date_cls(year, month, last)
    except (TypeError, ValueError, calendar.IllegalMonthError):
        raise ValidationError(f'Invalid month: {year}-{month}')


def parse_month(value):
    """'YYYY-MM' -> (year, month)"""
    try:
        year, month = str(value).split('-')
        month_bounds(year, month)
        return int(year), int(month)
    except (ValueError, ValidationError):
        raise ValidationError('Month must use the YYYY-MM format')


def to_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_cls):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f'Invalid date: {value}')
    return parsed


def _check_hour(hour):
    try:
        hour = int(hour)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid hour: {hour}')
    if not 0 <= hour < HOURS_PER_DAY:
        raise ValidationError(f'Hour must be between 0 and 23, got {hour}')
    return hour


def _each_day(first_day, last_day):
    day = first_day
    while day <= last_day:
        yield day
        day += timedelta(days=1)


def _get_space(space_id):
    try:
        return ParkingSpace.objects.get(pk=space_id)
    except ParkingSpace.DoesNotExist:
        raise NotFoundError('Parking space not found')


def _lock_space(space_id):
    try:
        return ParkingSpace.objects.select_for_update().get(pk=space_id)
    except ParkingSpace.DoesNotExist:
        raise NotFoundError('Parking space not found')


def _load_schedules(space_id, first_day, last_day):
    by_day = defaultdict(list)
    slots = AvailabilitySlot.objects.filter(
        parking_space_id=space_id,
        date__gte=first_day,
        date__lte=last_day,
    ).order_by('date', 'start_hour', 'id')
    for slot in slots:
        by_day[slot.date].append(_slot_range(slot))
    return {day: DaySchedule(ranges) for day, ranges in by_day.items()}


def _save_day(space_id, day, schedule):
    AvailabilitySlot.objects.filter(parking_space_id=space_id, date=day).delete()
    AvailabilitySlot.objects.bulk_create([_slot_row(space_id, day, slot) for slot in schedule.slots])


def _slot_range(slot):
    return HourRange(slot.start_hour, slot.end_hour, slot.is_available)


def _slot_row(space_id, day, hour_range):
    return AvailabilitySlot(
        parking_space_id=space_id,
        date=day,
        start_hour=hour_range.start_hour,
        end_hour=hour_range.end_hour,
        is_available=hour_range.is_available,
    )

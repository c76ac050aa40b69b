from datetime import date
from unittest.mock import patch

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings

from parking.availability import (
    DaySchedule,
    AvailabilityService,
    DAY_AVAILABLE,
    DAY_PARTIAL,
    DAY_UNAVAILABLE,
    parse_month,
)
from parking.models import AvailabilitySlot
from utils.exceptions import ValidationError, NotFoundError
from utils.intervals import HourRange, TimeInterval
from tests.base import MarketplaceSetupMixin, at

JUNE_1 = date(2024, 6, 1)


class DayScheduleTestCase(SimpleTestCase):
    def test_overlapping_slots_resolve_last_wins(self):
        schedule = DaySchedule([HourRange(0, 24, True), HourRange(10, 12, False)])
        self.assertEqual(schedule.slots, [
            HourRange(0, 10, True),
            HourRange(10, 12, False),
            HourRange(12, 24, True),
        ])

    def test_adjacent_equal_slots_merge(self):
        schedule = DaySchedule([HourRange(0, 5, True), HourRange(5, 10, True)])
        self.assertEqual(schedule.slots, [HourRange(0, 10, True)])

    def test_toggle_hour_splits_and_merges_back(self):
        schedule = DaySchedule().set_day(True)
        schedule.toggle_hour(13)
        self.assertEqual(len(schedule), 3)
        self.assertFalse(schedule.is_hour_available(13))
        self.assertEqual(schedule.status(), DAY_PARTIAL)

        schedule.toggle_hour(13)
        self.assertEqual(schedule.slots, [HourRange(0, 24, True)])
        self.assertEqual(schedule.status(), DAY_AVAILABLE)

    def test_toggle_uncovered_hour_opens_it(self):
        schedule = DaySchedule()
        schedule.toggle_hour(9)
        self.assertEqual(schedule.slots, [HourRange(9, 10, True)])
        self.assertIsNone(schedule.hour_value(10))

    def test_explicit_toggle_value(self):
        schedule = DaySchedule().set_day(False)
        schedule.toggle_hour(8, available=False)
        self.assertEqual(schedule.slots, [HourRange(0, 24, False)])

    def test_status(self):
        self.assertEqual(DaySchedule().status(), DAY_UNAVAILABLE)
        self.assertEqual(DaySchedule().set_day(False).status(), DAY_UNAVAILABLE)
        self.assertEqual(DaySchedule().set_day(True).status(), DAY_AVAILABLE)
        self.assertEqual(DaySchedule([HourRange(9, 17, True)]).status(), DAY_PARTIAL)
        self.assertEqual(DaySchedule([HourRange(0, 23, True)]).status(), DAY_PARTIAL)

    def test_hours_fall_back_to_default(self):
        schedule = DaySchedule([HourRange(9, 10, False)])
        self.assertTrue(schedule.is_hour_available(8))
        self.assertFalse(schedule.is_hour_available(8, default=False))
        self.assertFalse(schedule.hours()[9])

    def test_from_availability(self):
        closed = DaySchedule.from_availability({'available': False})
        self.assertEqual(closed.slots, [HourRange(0, 24, False)])

        hours = DaySchedule.from_availability({'available': True, 'hours': {'9': False, '10': False}})
        self.assertEqual(hours.slots, [HourRange(9, 11, False)])

    def test_listed_hours_take_precedence(self):
        schedule = DaySchedule.from_availability({'available': True, 'hours': {'9': False}})
        self.assertEqual(schedule.slots, [HourRange(9, 10, False)])

    def test_contradicting_day_flag_is_rejected(self):
        with self.assertRaises(ValidationError):
            DaySchedule.from_availability({'available': False, 'hours': {'9': True}})

        all_closed = {str(hour): False for hour in range(24)}
        with self.assertRaises(ValidationError):
            DaySchedule.from_availability({'available': True, 'hours': all_closed})
        self.assertEqual(
            DaySchedule.from_availability({'available': False, 'hours': all_closed}).status(),
            DAY_UNAVAILABLE,
        )

    def test_equal_halves_merge_into_an_available_day(self):
        schedule = DaySchedule([HourRange(0, 12, True), HourRange(12, 24, True)])
        self.assertEqual(schedule.slots, [HourRange(0, 24, True)])
        self.assertEqual(schedule.status(), DAY_AVAILABLE)

        hourly = DaySchedule.from_hours({str(hour): True for hour in range(24)})
        self.assertEqual(hourly.status(), DAY_AVAILABLE)

    def test_invalid_hours_are_rejected(self):
        with self.assertRaises(ValidationError):
            DaySchedule.from_hours({'nine': True})
        with self.assertRaises(ValidationError):
            DaySchedule.from_hours({'24': True})
        with self.assertRaises(ValidationError):
            DaySchedule().toggle_hour(24)
        with self.assertRaises(ValidationError):
            DaySchedule.from_availability(['9'])

    def test_parse_month(self):
        self.assertEqual(parse_month('2024-06'), (2024, 6))
        for value in ['2024-13', 'June', '2024-06-01', '']:
            with self.assertRaises(ValidationError):
                parse_month(value)


class AvailabilityServiceTestCase(MarketplaceSetupMixin, TestCase):
    def test_get_month_is_dense_and_open_by_default(self):
        calendar = AvailabilityService.get_month(self.space.id, 2024, 6)
        self.assertEqual(len(calendar), 30)
        self.assertEqual(min(calendar), JUNE_1)
        self.assertTrue(calendar[JUNE_1]['available'])
        self.assertEqual(len(calendar[JUNE_1]['hours']), 24)
        self.assertTrue(all(calendar[JUNE_1]['hours'].values()))

    @override_settings(AVAILABILITY_DEFAULT_OPEN=False)
    def test_get_month_default_closed(self):
        calendar = AvailabilityService.get_month(self.space.id, 2024, 2)
        self.assertEqual(len(calendar), 29)
        self.assertFalse(calendar[date(2024, 2, 1)]['available'])

    def test_get_month_unknown_space(self):
        with self.assertRaises(NotFoundError):
            AvailabilityService.get_month(9999, 2024, 6)

    def test_replace_month_round_trip(self):
        AvailabilityService.replace_month(self.space.id, 2024, 6, {
            '2024-06-01': {'available': True, 'hours': {'9': False, '10': False}},
            '2024-06-02': {'available': False},
        })

        calendar = AvailabilityService.get_month(self.space.id, 2024, 6)
        self.assertFalse(calendar[JUNE_1]['hours'][9])
        self.assertTrue(calendar[JUNE_1]['hours'][11])
        self.assertFalse(calendar[date(2024, 6, 2)]['available'])
        self.assertEqual(AvailabilitySlot.objects.filter(parking_space=self.space).count(), 2)

    def test_replace_month_drops_days_not_supplied(self):
        AvailabilityService.toggle_day(self.space.id, '2024-06-05', False)
        AvailabilityService.toggle_day(self.space.id, '2024-07-05', False)

        AvailabilityService.replace_month(self.space.id, 2024, 6, {})

        self.assertFalse(AvailabilitySlot.objects.filter(date=date(2024, 6, 5)).exists())
        self.assertTrue(AvailabilitySlot.objects.filter(date=date(2024, 7, 5)).exists())

    def test_replace_month_rejects_days_outside_the_month(self):
        AvailabilityService.toggle_day(self.space.id, JUNE_1, False)
        with self.assertRaises(ValidationError):
            AvailabilityService.replace_month(self.space.id, 2024, 6, {
                '2024-06-02': {'available': True},
                '2024-07-01': {'available': True},
            })
        self.assertEqual(AvailabilityService.month_status(self.space.id, 2024, 6)[JUNE_1], DAY_UNAVAILABLE)

    def test_replace_month_is_all_or_nothing(self):
        AvailabilityService.toggle_day(self.space.id, JUNE_1, False)

        with patch.object(AvailabilitySlot.objects, 'bulk_create', side_effect=DatabaseError('disk full')):
            with self.assertRaises(DatabaseError):
                AvailabilityService.replace_month(self.space.id, 2024, 6, {
                    '2024-06-01': {'available': True},
                    '2024-06-02': {'available': False},
                })

        slots = list(AvailabilitySlot.objects.filter(parking_space=self.space))
        self.assertEqual(len(slots), 1)
        self.assertEqual((slots[0].date, slots[0].is_available), (JUNE_1, False))

    def test_toggle_hour_persists_normalized_slots(self):
        AvailabilityService.toggle_day(self.space.id, JUNE_1, True)
        day = AvailabilityService.toggle_hour(self.space.id, JUNE_1, 13)
        self.assertFalse(day['hours'][13])
        self.assertEqual(AvailabilitySlot.objects.filter(date=JUNE_1).count(), 3)

        AvailabilityService.toggle_hour(self.space.id, JUNE_1, 13)
        slots = AvailabilitySlot.objects.filter(date=JUNE_1)
        self.assertEqual([(s.start_hour, s.end_hour, s.is_available) for s in slots], [(0, 24, True)])

    def test_toggle_hour_validates_hour(self):
        with self.assertRaises(ValidationError):
            AvailabilityService.toggle_hour(self.space.id, JUNE_1, 24)

    def test_month_status(self):
        AvailabilityService.toggle_day(self.space.id, JUNE_1, True)
        AvailabilityService.toggle_hour(self.space.id, date(2024, 6, 2), 9, True)
        statuses = AvailabilityService.month_status(self.space.id, 2024, 6)
        self.assertEqual(statuses[JUNE_1], DAY_AVAILABLE)
        self.assertEqual(statuses[date(2024, 6, 2)], DAY_PARTIAL)
        self.assertEqual(statuses[date(2024, 6, 3)], DAY_UNAVAILABLE)

    def test_blocked_hours(self):
        AvailabilityService.toggle_hour(self.space.id, JUNE_1, 12, False)
        interval = TimeInterval(at(1, 9), at(1, 17))
        self.assertEqual(AvailabilityService.blocked_hours(self.space.id, interval), [(JUNE_1, 12)])

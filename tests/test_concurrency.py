import threading
import time
from datetime import date

from django.db import connection, transaction
from django.test import TransactionTestCase, skipUnlessDBFeature

from bookings.models import Booking
from bookings.services import BookingService
from parking.availability import AvailabilityService
from utils.exceptions import ConflictError
from utils.intervals import TimeInterval
from tests.base import MarketplaceSetupMixin, at


def run_concurrently(*targets):
    """Run each target in its own thread with its own database connection"""
    errors = []

    def wrap(target):
        def run():
            try:
                target()
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()
        return run

    threads = [threading.Thread(target=wrap(target)) for target in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return errors


@skipUnlessDBFeature('has_select_for_update')
class ConcurrentBookingTestCase(MarketplaceSetupMixin, TransactionTestCase):
    def book(self, renter, vehicle):
        return BookingService.create(
            self.space.id, renter.id, vehicle.id, TimeInterval(at(1, 9), at(1, 17)), vehicle_fits=True,
        )

    def test_overlapping_requests_yield_one_booking(self):
        first_inserted = threading.Event()
        outcomes = {}

        def first():
            try:
                with transaction.atomic():
                    outcomes['first'] = self.book(self.renter, self.vehicle)
                    first_inserted.set()
                    # keep the space row locked while the second request arrives
                    time.sleep(0.5)
            finally:
                first_inserted.set()

        def second():
            first_inserted.wait(5)
            try:
                outcomes['second'] = self.book(self.other_renter, self.other_vehicle)
            except ConflictError as e:
                outcomes['second'] = e

        self.assertEqual(run_concurrently(first, second), [])
        self.assertIsInstance(outcomes['first'], Booking)
        self.assertIsInstance(outcomes['second'], ConflictError)
        self.assertEqual(Booking.objects.filter(parking_space=self.space).count(), 1)


@skipUnlessDBFeature('has_select_for_update')
class ConcurrentAvailabilityTestCase(MarketplaceSetupMixin, TransactionTestCase):
    def month(self, available):
        return {date(2024, 6, day).isoformat(): {'available': available} for day in range(1, 31)}

    def test_reader_sees_old_or_new_month(self):
        AvailabilityService.replace_month(self.space.id, 2024, 6, self.month(False))
        replaced = threading.Event()
        read_done = threading.Event()
        snapshots = []

        def writer():
            with transaction.atomic():
                AvailabilityService.replace_month(self.space.id, 2024, 6, self.month(True))
                replaced.set()
                # commit only after the reader has looked
                read_done.wait(5)

        def reader():
            replaced.wait(5)
            try:
                snapshots.append(AvailabilityService.get_month(self.space.id, 2024, 6))
            finally:
                read_done.set()

        self.assertEqual(run_concurrently(writer, reader), [])

        during = {day['available'] for day in snapshots[0].values()}
        after = {day['available'] for day in AvailabilityService.get_month(self.space.id, 2024, 6).values()}
        self.assertEqual(during, {False})
        self.assertEqual(after, {True})

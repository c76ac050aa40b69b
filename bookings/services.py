# ==================== BOOKINGS/SERVICES.PY ====================
import logging
from django.db import transaction
from django.utils import timezone

from notifications.services import notify
from parking.models import ParkingSpace
from utils.exceptions import ConflictError, AuthorizationError, InvalidStateError, NotFoundError
from .conflicts import ConflictDetector
from .models import Booking
from .pricing import PricingEngine

logger = logging.getLogger(__name__)


class BookingService:
    """Booking lifecycle: pending -> confirmed -> completed, pending/confirmed -> cancelled

    Every operation runs in its own transaction. Creation and rescheduling
    lock the parking space row first so that the overlap check and the write
    cannot interleave with another request for the same space.
    """

    @staticmethod
    def get(booking_id):
        try:
            return Booking.objects.select_related('parking_space', 'renter', 'vehicle').get(pk=booking_id)
        except (Booking.DoesNotExist, ValueError):
            raise NotFoundError('Booking not found')

    @staticmethod
    def create(space_id, renter_id, vehicle_id, interval, vehicle_fits, special_requests=''):
        if not vehicle_fits:
            raise ConflictError('Selected vehicle is too large for this parking space')

        with transaction.atomic():
            space = _lock_space(space_id)
            if space.status != 'active':
                raise ConflictError('Parking space is not accepting bookings')

            result = ConflictDetector.check(space.id, interval.start, interval.end)
            if result.conflict:
                logger.warning(f"Booking rejected for space {space.id} {interval}: "
                               f"bookings={result.conflicting_booking_ids} "
                               f"closed_hours={len(result.unavailable_hours)}")
                raise ConflictError(conflicting_booking_ids=result.conflicting_booking_ids)

            quote = PricingEngine.quote_interval(interval, space.rates)
            booking = Booking.objects.create(
                parking_space=space,
                renter_id=renter_id,
                vehicle_id=vehicle_id,
                start_datetime=interval.start,
                end_datetime=interval.end,
                billing_mode=quote.billing_mode,
                duration_hours=quote.duration_hours,
                total_amount=quote.amount,
                special_requests=special_requests or '',
                status=Booking.PENDING,
            )

        logger.info(f"Booking {booking.id} created for space {space.id}: "
                    f"{quote.duration_hours}h {quote.billing_mode} = {quote.amount}")
        return booking

    @staticmethod
    def confirm(booking_id):
        """Payment captured for a pending booking"""
        with transaction.atomic():
            booking = _lock_booking(booking_id)
            _transition(booking, Booking.CONFIRMED)

            space = booking.parking_space
            renter = booking.renter
            notify(
                space.owner_id, 'booking', 'Booking Confirmed',
                f'Your space "{space.title}" has been booked by {renter.first_name or renter.username}',
                {'booking_id': booking.id},
            )
            notify(
                booking.renter_id, 'booking', 'Payment Successful',
                f'Your booking for "{space.title}" has been confirmed',
                {'booking_id': booking.id},
            )
        return booking

    @staticmethod
    def cancel(booking_id, actor_id):
        """Cancel on behalf of the renter or the space owner; repeating it is a no-op"""
        with transaction.atomic():
            booking = _lock_booking(booking_id)
            if not booking.is_party(actor_id):
                raise AuthorizationError('Not authorized to cancel this booking')
            if booking.status == Booking.CANCELLED:
                logger.info(f"Booking {booking.id} already cancelled")
                return booking

            _transition(booking, Booking.CANCELLED, cancelled_by_id=actor_id, cancelled_at=timezone.now())
            notify(
                booking.other_party_id(actor_id), 'booking', 'Booking Cancelled',
                f'A booking for "{booking.parking_space.title}" has been cancelled',
                {'booking_id': booking.id},
            )
        return booking

    @staticmethod
    def fail_payment(booking_id):
        """Payment failed for a pending booking, release the slot"""
        with transaction.atomic():
            booking = _lock_booking(booking_id)
            if booking.status == Booking.CANCELLED:
                return booking
            if booking.status != Booking.PENDING:
                raise InvalidStateError(f'Cannot fail payment of a {booking.status} booking')

            _transition(booking, Booking.CANCELLED, cancelled_at=timezone.now())
            notify(
                booking.renter_id, 'booking', 'Payment Failed',
                'Your booking payment failed. Please try again.',
                {'booking_id': booking.id},
            )
        return booking

    @staticmethod
    def complete(booking_id, now=None):
        now = now or timezone.now()
        with transaction.atomic():
            booking = _lock_booking(booking_id)
            if booking.status == Booking.CONFIRMED and booking.end_datetime > now:
                raise InvalidStateError('Booking has not ended yet')
            _transition(booking, Booking.COMPLETED)
            notify(
                booking.renter_id, 'booking', 'Booking Completed',
                f'Your booking at "{booking.parking_space.title}" has ended',
                {'booking_id': booking.id},
            )
        return booking

    @staticmethod
    def reschedule(booking_id, actor_id, interval):
        """Move a pending booking to a new interval and re-price it"""
        booking = BookingService.get(booking_id)
        if actor_id != booking.renter_id:
            raise AuthorizationError('Only the renter can reschedule this booking')

        with transaction.atomic():
            space = _lock_space(booking.parking_space_id)
            booking = _lock_booking(booking_id)
            if booking.status != Booking.PENDING:
                raise InvalidStateError('Only pending bookings can be rescheduled')

            result = ConflictDetector.check(space.id, interval.start, interval.end,
                                            exclude_booking_id=booking.id)
            if result.conflict:
                raise ConflictError(conflicting_booking_ids=result.conflicting_booking_ids)

            quote = PricingEngine.quote_interval(interval, space.rates)
            booking.start_datetime = interval.start
            booking.end_datetime = interval.end
            booking.billing_mode = quote.billing_mode
            booking.duration_hours = quote.duration_hours
            booking.total_amount = quote.amount
            booking.save()

        logger.info(f"Booking {booking.id} rescheduled to {interval}")
        return booking

    @staticmethod
    def update_details(booking_id, actor_id, special_requests):
        with transaction.atomic():
            booking = _lock_booking(booking_id)
            if not booking.is_party(actor_id):
                raise AuthorizationError()
            booking.special_requests = special_requests or ''
            booking.save(update_fields=['special_requests', 'updated_at'])
        return booking


def _lock_space(space_id):
    try:
        return ParkingSpace.objects.select_for_update().get(pk=space_id)
    except (ParkingSpace.DoesNotExist, ValueError):
        raise NotFoundError('Parking space not found')


def _lock_booking(booking_id):
    try:
        return Booking.objects.select_for_update().get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError):
        raise NotFoundError('Booking not found')


def _transition(booking, new_status, **changes):
    if not booking.can_transition_to(new_status):
        raise InvalidStateError(f'Cannot move a {booking.status} booking to {new_status}')

    old_status = booking.status
    booking.status = new_status
    for field, value in changes.items():
        setattr(booking, field, value)
    booking.save(update_fields=['status', 'updated_at', *changes.keys()])
    logger.info(f"Booking {booking.id}: {old_status} -> {new_status}")

# ==================== PAYMENTS/SERVICES.PY ====================
import razorpay
from razorpay.errors import SignatureVerificationError
import logging
from decimal import Decimal
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from bookings.models import Booking
from bookings.services import BookingService
from utils.exceptions import AuthorizationError, InvalidStateError, NotFoundError
from .models import Payment

logger = logging.getLogger(__name__)


def to_subunits(amount):
    """Razorpay amounts are integers in the smallest currency unit (paise)"""
    return int(Decimal(amount).quantize(Decimal('0.01')) * 100)


class RazorpayService:
    """Razorpay payment gateway integration"""

    def __init__(self, client=None):
        self.client = client or razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )

    def create_order(self, booking_id, amount, notes=None):
        """Create Razorpay order, returns the order dict including its id"""
        order_data = {
            'amount': to_subunits(amount),
            'currency': settings.RAZORPAY_CURRENCY,
            'receipt': f'booking_{booking_id}_{int(timezone.now().timestamp())}',
            'notes': notes or {'booking_id': str(booking_id)},
        }
        try:
            order = self.client.order.create(data=order_data)
        except Exception as e:
            logger.error(f"Error creating Razorpay order for booking {booking_id}: {str(e)}")
            raise
        logger.info(f"Razorpay order created: {order['id']} for booking {booking_id}")
        return order

    def verify_webhook_signature(self, body, signature):
        if not signature:
            return False
        if isinstance(body, bytes):
            body = body.decode('utf-8')
        try:
            self.client.utility.verify_webhook_signature(body, signature, settings.RAZORPAY_WEBHOOK_SECRET)
            return True
        except SignatureVerificationError:
            return False


class PaymentService:
    """Bridges payment events and the booking lifecycle"""

    @staticmethod
    def initiate(booking_id, actor_id, gateway=None):
        """Create (or reuse) the Razorpay order of a pending booking"""
        try:
            booking = Booking.objects.get(id=booking_id)
        except Booking.DoesNotExist:
            raise NotFoundError('Booking not found')

        if actor_id != booking.renter_id:
            raise AuthorizationError('Only the renter can pay for this booking')
        if booking.status != Booking.PENDING:
            raise InvalidStateError(f'Cannot pay for booking in {booking.status} status')

        payment, created = Payment.objects.get_or_create(
            booking=booking,
            defaults={'amount': booking.total_amount, 'currency': settings.RAZORPAY_CURRENCY},
        )
        if payment.status != 'initiated':
            raise InvalidStateError(f'Payment already {payment.status}')
        if payment.razorpay_order_id:
            return payment

        order = (gateway or RazorpayService()).create_order(booking.id, payment.amount)
        payment.razorpay_order_id = order['id']
        payment.save(update_fields=['razorpay_order_id', 'updated_at'])
        return payment

    @staticmethod
    def _payment_for_order(order_id):
        try:
            return Payment.objects.select_for_update().get(razorpay_order_id=order_id)
        except Payment.DoesNotExist:
            raise NotFoundError(f'No payment for order {order_id}')

    @staticmethod
    def handle_captured(payment_data):
        """payment.captured: confirm the booking once"""
        with transaction.atomic():
            payment = PaymentService._payment_for_order(payment_data.get('order_id'))
            if payment.status == 'captured':
                logger.info(f"Duplicate capture for order {payment.razorpay_order_id} ignored")
                return payment

            payment.status = 'captured'
            payment.razorpay_payment_id = payment_data.get('id')
            payment.gateway_response = payment_data
            payment.captured_at = timezone.now()
            payment.save()

            # the capture is stored even when the booking was cancelled in the meantime
            booking = Booking.objects.select_for_update().get(pk=payment.booking_id)
            if booking.status != Booking.PENDING:
                logger.warning(f"Payment {payment.razorpay_payment_id} captured against "
                               f"{booking.status} booking {booking.id}, refund required")
                return payment
            BookingService.confirm(booking.id)

        logger.info(f"Payment {payment.razorpay_payment_id} captured, booking {payment.booking_id} confirmed")
        return payment

    @staticmethod
    def handle_failed(payment_data):
        """payment.failed: release the booking"""
        with transaction.atomic():
            payment = PaymentService._payment_for_order(payment_data.get('order_id'))
            if payment.status == 'captured':
                raise InvalidStateError(f'Order {payment.razorpay_order_id} is already captured')

            payment.status = 'failed'
            payment.razorpay_payment_id = payment_data.get('id')
            payment.gateway_response = {'error': payment_data.get('error_description', 'Unknown error')}
            payment.save()
            BookingService.fail_payment(payment.booking_id)

        logger.warning(f"Payment failed for order {payment.razorpay_order_id}: "
                       f"{payment.gateway_response['error']}")
        return payment

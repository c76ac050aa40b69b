# ==================== PAYMENTS/VIEWS.PY ====================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from django.conf import settings
import logging

from .models import Payment
from .serializers import PaymentInitiateSerializer, PaymentSerializer
from .services import PaymentService
from utils.exceptions import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ViewSet):
    """Start payments and report their status"""
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=['post'])
    def initiate_payment(self, request):
        """Initiate payment for a pending booking

        Body: {"booking_id": 1}
        """
        serializer = PaymentInitiateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = PaymentService.initiate(serializer.validated_data['booking_id'], request.user.id)
        return Response({
            'payment_id': payment.id,
            'razorpay_order_id': payment.razorpay_order_id,
            'amount': str(payment.amount),
            'currency': payment.currency,
            'key_id': settings.RAZORPAY_KEY_ID,
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def payment_status(self, request):
        """?booking_id=X"""
        booking_id = request.query_params.get('booking_id')
        try:
            payment = Payment.objects.select_related('booking__parking_space').get(booking_id=booking_id)
        except (Payment.DoesNotExist, ValueError):
            raise NotFoundError('Payment not found')

        if not payment.booking.is_party(request.user.id):
            raise AuthorizationError('Access denied')
        return Response(PaymentSerializer(payment).data)

# ==================== PAYMENTS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import Payment


class PaymentInitiateSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField()


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ['id', 'booking', 'amount', 'currency', 'status', 'razorpay_order_id',
                  'razorpay_payment_id', 'captured_at', 'created_at']
        read_only_fields = fields

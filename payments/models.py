# ==================== PAYMENTS/MODELS.PY ====================
from django.db import models


class Payment(models.Model):
    """Payment collected for a booking through Razorpay"""
    STATUS_CHOICES = (
        ('initiated', 'Initiated'),
        ('captured', 'Captured'),
        ('failed', 'Failed'),
    )

    booking = models.OneToOneField('bookings.Booking', on_delete=models.CASCADE, related_name='payment')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default='INR')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='initiated', db_index=True)

    razorpay_order_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    razorpay_payment_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    gateway_response = models.JSONField(default=dict, blank=True)

    captured_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Payment {self.id} for booking {self.booking_id} - {self.status}"

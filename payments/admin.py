# ==================== PAYMENTS/ADMIN.PY ====================
from django.contrib import admin
from .models import Payment

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'booking', 'amount', 'currency', 'status', 'razorpay_order_id', 'created_at']
    list_filter = ['status', 'currency', 'created_at']
    search_fields = ['razorpay_order_id', 'razorpay_payment_id', 'booking__id']
    readonly_fields = ['gateway_response', 'captured_at', 'created_at', 'updated_at']

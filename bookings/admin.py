# ==================== BOOKINGS/ADMIN.PY ====================
from django.contrib import admin
from .models import Booking

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'renter', 'parking_space', 'status', 'billing_mode', 'start_datetime', 'total_amount', 'created_at']
    list_filter = ['status', 'billing_mode', 'created_at']
    search_fields = ['renter__username', 'parking_space__title', 'vehicle__license_plate']
    readonly_fields = ['created_at', 'updated_at', 'total_amount', 'duration_hours', 'billing_mode']

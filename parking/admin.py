# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingSpace, AvailabilitySlot

class AvailabilitySlotInline(admin.TabularInline):
    model = AvailabilitySlot
    extra = 0

@admin.register(ParkingSpace)
class ParkingSpaceAdmin(admin.ModelAdmin):
    list_display = ['title', 'owner', 'city', 'space_type', 'status', 'hourly_price', 'daily_price', 'created_at']
    list_filter = ['space_type', 'status', 'city', 'created_at']
    search_fields = ['title', 'address', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [AvailabilitySlotInline]
    fieldsets = (
        ('Basic Info', {'fields': ('owner', 'title', 'description', 'address', 'city', 'area')}),
        ('Space Details', {'fields': ('space_type', 'status')}),
        ('Pricing', {'fields': ('hourly_price', 'daily_price')}),
        ('Vehicle Restrictions', {'fields': ('length_cm', 'width_cm', 'height_cm')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(AvailabilitySlot)
class AvailabilitySlotAdmin(admin.ModelAdmin):
    list_display = ['parking_space', 'date', 'start_hour', 'end_hour', 'is_available']
    list_filter = ['is_available', 'date']
    search_fields = ['parking_space__title']

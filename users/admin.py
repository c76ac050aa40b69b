# ==================== USERS/ADMIN.PY ====================
from django.contrib import admin
from .models import CustomUser, Vehicle

@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['username', 'email', 'phone_number', 'user_type', 'created_at']
    list_filter = ['user_type', 'created_at']
    search_fields = ['username', 'email', 'phone_number']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['license_plate', 'owner', 'make', 'model', 'is_primary', 'created_at']
    list_filter = ['make', 'is_primary']
    search_fields = ['license_plate', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']

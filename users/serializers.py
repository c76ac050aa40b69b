# ==================== USERS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import CustomUser, Vehicle


class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone_number', 'user_type', 'bio']
        read_only_fields = ['id', 'username']


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ['id', 'make', 'model', 'year', 'license_plate', 'length_cm', 'width_cm', 'height_cm',
                  'is_primary', 'created_at']
        read_only_fields = ['created_at']

    def validate_license_plate(self, value):
        value = value.upper()
        user = self.context['request'].user
        existing = Vehicle.objects.filter(owner=user, license_plate=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("You have already registered this vehicle")
        return value

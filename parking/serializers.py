# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingSpace


class ParkingSpaceListSerializer(serializers.ModelSerializer):
    """Simplified serializer for listing parking spaces"""
    owner_name = serializers.CharField(source='owner.get_full_name', read_only=True)

    class Meta:
        model = ParkingSpace
        fields = ['id', 'title', 'address', 'city', 'area', 'space_type', 'hourly_price', 'daily_price',
                  'length_cm', 'width_cm', 'height_cm', 'status', 'owner_name']


class ParkingSpaceDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = ParkingSpace
        fields = ['id', 'owner', 'title', 'description', 'address', 'city', 'area', 'space_type',
                  'hourly_price', 'daily_price', 'length_cm', 'width_cm', 'height_cm', 'status',
                  'created_at', 'updated_at']
        read_only_fields = ['owner', 'created_at', 'updated_at']


class MonthAvailabilitySerializer(serializers.Serializer):
    """Body of POST /parking-spaces/{id}/availability/"""
    month = serializers.RegexField(r'^\d{4}-\d{2}$')
    availability = serializers.DictField(child=serializers.DictField())


class DayToggleSerializer(serializers.Serializer):
    date = serializers.DateField()
    available = serializers.BooleanField()


class HourToggleSerializer(serializers.Serializer):
    date = serializers.DateField()
    hour = serializers.IntegerField(min_value=0, max_value=23)
    available = serializers.BooleanField(required=False, allow_null=True, default=None)

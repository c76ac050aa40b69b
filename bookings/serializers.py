# ==================== BOOKINGS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import Booking
from users.models import Vehicle

from utils.intervals import TimeInterval


class BookingCreateSerializer(serializers.Serializer):
    space_id = serializers.IntegerField()
    vehicle_id = serializers.IntegerField()
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()
    special_requests = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_vehicle_id(self, value):
        user = self.context['request'].user
        if not Vehicle.objects.filter(id=value, owner=user).exists():
            raise serializers.ValidationError("Vehicle not found")
        return value

    def validate(self, data):
        data['interval'] = TimeInterval(data['start_datetime'], data['end_datetime'])
        return data


class BookingUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES, required=False)
    special_requests = serializers.CharField(required=False, allow_blank=True)
    start_datetime = serializers.DateTimeField(required=False)
    end_datetime = serializers.DateTimeField(required=False)


class BookingQuoteSerializer(serializers.Serializer):
    space_id = serializers.IntegerField()
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()

    def validate(self, data):
        data['interval'] = TimeInterval(data['start_datetime'], data['end_datetime'])
        return data


class PriceQuoteSerializer(serializers.Serializer):
    duration_hours = serializers.IntegerField()
    billing_mode = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class BookingListSerializer(serializers.ModelSerializer):
    parking_space_title = serializers.CharField(source='parking_space.title', read_only=True)
    license_plate = serializers.CharField(source='vehicle.license_plate', read_only=True, default=None)

    class Meta:
        model = Booking
        fields = ['id', 'parking_space', 'parking_space_title', 'license_plate', 'start_datetime',
                  'end_datetime', 'status', 'billing_mode', 'total_amount', 'created_at']


class BookingDetailSerializer(serializers.ModelSerializer):
    parking_space_title = serializers.CharField(source='parking_space.title', read_only=True)
    owner = serializers.IntegerField(source='parking_space.owner_id', read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'parking_space', 'parking_space_title', 'owner', 'renter', 'vehicle',
                  'start_datetime', 'end_datetime', 'status', 'billing_mode', 'duration_hours',
                  'total_amount', 'special_requests', 'cancelled_by', 'cancelled_at',
                  'created_at', 'updated_at']
        read_only_fields = fields

# ============================= PARKING/FILTERS.PY =============================
import django_filters
from django.db.models import Q

from bookings.models import Booking
from .models import ParkingSpace


class ParkingSpaceFilter(django_filters.FilterSet):
    """Filtering for parking space search"""

    price_min = django_filters.NumberFilter(
        field_name='hourly_price',
        lookup_expr='gte',
        label='Minimum Price Per Hour'
    )
    price_max = django_filters.NumberFilter(
        field_name='hourly_price',
        lookup_expr='lte',
        label='Maximum Price Per Hour'
    )
    daily_price_max = django_filters.NumberFilter(
        field_name='daily_price',
        lookup_expr='lte',
        label='Maximum Price Per Day'
    )
    min_length = django_filters.NumberFilter(field_name='length_cm', lookup_expr='gte')
    min_width = django_filters.NumberFilter(field_name='width_cm', lookup_expr='gte')
    min_height = django_filters.NumberFilter(method='filter_min_height')

    available_start = django_filters.IsoDateTimeFilter(method='filter_available')
    available_end = django_filters.IsoDateTimeFilter(method='filter_available')

    class Meta:
        model = ParkingSpace
        fields = {
            'city': ['exact', 'icontains'],
            'area': ['icontains'],
            'space_type': ['exact'],
            'status': ['exact'],
        }

    def filter_min_height(self, queryset, name, value):
        # spaces without a recorded height have no limit
        return queryset.filter(Q(height_cm__gte=value) | Q(height_cm__isnull=True))

    def filter_available(self, queryset, name, value):
        """Drop spaces with a non-cancelled booking overlapping [available_start, available_end)"""
        start = self.form.cleaned_data.get('available_start')
        end = self.form.cleaned_data.get('available_end')
        if not start or not end or start >= end or name != 'available_start':
            return queryset

        busy = Booking.objects.filter(
            start_datetime__lt=end,
            end_datetime__gt=start,
        ).exclude(status=Booking.CANCELLED).values('parking_space_id')
        return queryset.exclude(id__in=busy)

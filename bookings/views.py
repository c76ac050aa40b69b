# ============================= BOOKINGS VIEWS =============================
from django.db import transaction
from rest_framework import viewsets, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from bookings.conflicts import ConflictDetector
from bookings.models import Booking
from bookings.pricing import PricingEngine
from bookings.serializers import (
    BookingCreateSerializer,
    BookingUpdateSerializer,
    BookingQuoteSerializer,
    BookingListSerializer,
    BookingDetailSerializer,
    PriceQuoteSerializer,
)
from bookings.services import BookingService
from parking.models import ParkingSpace
from users.models import Vehicle
from utils.exceptions import AuthorizationError, InvalidStateError, NotFoundError
from utils.intervals import TimeInterval


class BookingViewSet(viewsets.ModelViewSet):
    """Booking creation, cancellation and rescheduling"""

    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [
        DjangoFilterBackend,
        filters.OrderingFilter
    ]
    filterset_fields = ['status', 'parking_space']
    ordering_fields = ['created_at', 'start_datetime', 'total_amount']
    ordering = ['-created_at']

    def get_serializer_class(self):
        if self.action == 'list':
            return BookingListSerializer
        return BookingDetailSerializer

    def get_queryset(self):
        """?type=owner lists bookings of the user's spaces, renter bookings otherwise"""
        user = self.request.user
        queryset = Booking.objects.select_related('parking_space', 'vehicle')
        if self.request.query_params.get('type') == 'owner':
            return queryset.filter(parking_space__owner=user)
        return queryset.filter(renter=user)

    def get_object(self):
        booking = BookingService.get(self.kwargs['pk'])
        if not booking.is_party(self.request.user.id):
            raise AuthorizationError('Access denied')
        return booking

    def create(self, request, *args, **kwargs):
        """Body: {space_id, vehicle_id, start_datetime, end_datetime, special_requests}"""
        serializer = BookingCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            space = ParkingSpace.objects.get(id=data['space_id'])
        except ParkingSpace.DoesNotExist:
            raise NotFoundError('Parking space not found')
        vehicle = Vehicle.objects.get(id=data['vehicle_id'])

        booking = BookingService.create(
            space_id=space.id,
            renter_id=request.user.id,
            vehicle_id=vehicle.id,
            interval=data['interval'],
            vehicle_fits=space.fits_vehicle(vehicle),
            special_requests=data['special_requests'],
        )
        return Response(BookingDetailSerializer(booking).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Body: {status?, special_requests?, start_datetime?, end_datetime?}

        Only cancellation can be requested through status, confirmation
        and completion come from payment events and the scheduler.
        """
        booking = self.get_object()
        serializer = BookingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        new_status = data.get('status')
        if new_status and new_status not in (booking.status, Booking.CANCELLED):
            raise InvalidStateError(f'Cannot move a {booking.status} booking to {new_status}')

        with transaction.atomic():
            if 'special_requests' in data:
                booking = BookingService.update_details(booking.id, request.user.id, data['special_requests'])
            if 'start_datetime' in data or 'end_datetime' in data:
                interval = TimeInterval(
                    data.get('start_datetime', booking.start_datetime),
                    data.get('end_datetime', booking.end_datetime),
                )
                booking = BookingService.reschedule(booking.id, request.user.id, interval)
            if new_status == Booking.CANCELLED:
                booking = BookingService.cancel(booking.id, request.user.id)

        return Response(BookingDetailSerializer(booking).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        """Bookings are never deleted, DELETE cancels"""
        booking = BookingService.cancel(kwargs['pk'], request.user.id)
        return Response(BookingDetailSerializer(booking).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        booking = BookingService.cancel(pk, request.user.id)
        return Response(BookingDetailSerializer(booking).data)

    @action(detail=False, methods=['get'])
    def quote(self, request):
        """Price and availability of a proposed interval

        Example: /api/v1/bookings/quote/?space_id=1&start_datetime=2024-06-01T09:00Z&end_datetime=2024-06-01T17:00Z
        """
        serializer = BookingQuoteSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        interval = data['interval']

        try:
            space = ParkingSpace.objects.get(id=data['space_id'])
        except ParkingSpace.DoesNotExist:
            raise NotFoundError('Parking space not found')

        quote = PricingEngine.quote_interval(interval, space.rates)
        result = ConflictDetector.check(space.id, interval.start, interval.end)

        response = PriceQuoteSerializer(quote).data
        response['space_id'] = space.id
        response['available'] = not result.conflict
        return Response(response)

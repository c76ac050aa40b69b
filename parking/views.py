# ============================= PARKINGSPACE VIEWS =============================
from rest_framework import viewsets, status, permissions, filters
from rest_framework.exceptions import PermissionDenied
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from utils.exceptions import ValidationError
from utils.permissions import IsOwner
from .availability import AvailabilityService, parse_month
from .models import ParkingSpace
from .serializers import (
    ParkingSpaceListSerializer,
    ParkingSpaceDetailSerializer,
    MonthAvailabilitySerializer,
    DayToggleSerializer,
    HourToggleSerializer,
)
from .filters import ParkingSpaceFilter


class ParkingSpaceViewSet(viewsets.ModelViewSet):
    """Parking space listing, creation, and availability management"""

    queryset = ParkingSpace.objects.select_related('owner')
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter
    ]
    filterset_class = ParkingSpaceFilter
    search_fields = ['title', 'address', 'area', 'description']
    ordering_fields = ['created_at', 'hourly_price', 'daily_price']
    ordering = ['-created_at']

    OWNER_ACTIONS = ['update', 'partial_update', 'destroy', 'toggle_day', 'toggle_hour']

    def get_serializer_class(self):
        if self.action == 'list':
            return ParkingSpaceListSerializer
        return ParkingSpaceDetailSerializer

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [permissions.AllowAny]
        elif self.action in ['availability', 'availability_status']:
            permission_classes = [permissions.IsAuthenticatedOrReadOnly]
        elif self.action in self.OWNER_ACTIONS:
            permission_classes = [permissions.IsAuthenticated, IsOwner]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    @action(detail=False, methods=['get'])
    def my_spaces(self, request):
        """Get all parking spaces owned by current user"""
        spaces = self.get_queryset().filter(owner=request.user)
        serializer = ParkingSpaceListSerializer(spaces, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['get', 'post'])
    def availability(self, request, pk=None):
        """Month availability calendar

        GET  ?month=YYYY-MM  -> {"YYYY-MM-DD": {"available": bool, "hours": {"0": bool, ...}}}
        POST {"month": "YYYY-MM", "availability": {...}}  (owner only) -> {"success": true}
        """
        space = self.get_object()

        if request.method == 'GET':
            month = request.query_params.get('month')
            if not month:
                raise ValidationError('Month parameter required')
            year, month = parse_month(month)
            calendar = AvailabilityService.get_month(space.id, year, month)
            return Response({day.isoformat(): value for day, value in calendar.items()})

        if not IsOwner().has_object_permission(request, self, space):
            raise PermissionDenied("You can only edit availability of your own parking spaces")

        serializer = MonthAvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        year, month = parse_month(serializer.validated_data['month'])
        AvailabilityService.replace_month(space.id, year, month, serializer.validated_data['availability'])
        return Response({'success': True})

    @action(detail=True, methods=['get'])
    def availability_status(self, request, pk=None):
        """Day status (available / partial / unavailable) for every day of ?month=YYYY-MM"""
        space = self.get_object()
        month = request.query_params.get('month')
        if not month:
            raise ValidationError('Month parameter required')
        year, month = parse_month(month)
        statuses = AvailabilityService.month_status(space.id, year, month)
        return Response({day.isoformat(): value for day, value in statuses.items()})

    @action(detail=True, methods=['post'])
    def toggle_day(self, request, pk=None):
        """Body: {"date": "YYYY-MM-DD", "available": bool}"""
        space = self.get_object()
        serializer = DayToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        day = AvailabilityService.toggle_day(
            space.id,
            serializer.validated_data['date'],
            serializer.validated_data['available'],
        )
        return Response(day, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def toggle_hour(self, request, pk=None):
        """Body: {"date": "YYYY-MM-DD", "hour": 0-23, "available": bool (optional, flips when omitted)}"""
        space = self.get_object()
        serializer = HourToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        day = AvailabilityService.toggle_hour(
            space.id,
            serializer.validated_data['date'],
            serializer.validated_data['hour'],
            serializer.validated_data['available'],
        )
        return Response(day, status=status.HTTP_200_OK)

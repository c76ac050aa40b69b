# ==================== USERS/VIEWS.PY ====================
from rest_framework import viewsets, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from .models import Vehicle
from .serializers import UserProfileSerializer, VehicleSerializer


class UserViewSet(viewsets.ViewSet):
    """Profile of the authenticated user"""
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=['get', 'put'])
    def profile(self, request):
        """Get or update user profile"""
        if request.method == 'GET':
            return Response(UserProfileSerializer(request.user).data)

        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class VehicleViewSet(viewsets.ModelViewSet):
    """Register and manage renter vehicles"""
    serializer_class = VehicleSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Vehicle.objects.filter(owner=self.request.user)

    def perform_create(self, serializer):
        vehicle = serializer.save(owner=self.request.user)
        if vehicle.is_primary:
            self.get_queryset().exclude(pk=vehicle.pk).update(is_primary=False)

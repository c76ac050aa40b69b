# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions

class IsOwner(permissions.BasePermission):
    """Permission to check if user is owner of the parking space"""
    message = 'You can only manage your own parking spaces'

    def has_object_permission(self, request, view, obj):
        return obj.owner_id == request.user.id

"""
Role-based permissions for staff users
"""
from rest_framework import permissions

from core.constants import UserRole


class IsStaffRole(permissions.BasePermission):
    """
    Permission to allow any staff role (superadmin, admin, support)
    """

    def has_permission(self, request, view):
        """Check if user is authenticated and has a known role"""
        if not (request.user and request.user.is_authenticated):
            return False
        return request.user.is_superuser or request.user.role in dict(UserRole.CHOICES)


class IsManagerRole(permissions.BasePermission):
    """
    Permission to allow Superadmin and Admin roles to change data.
    Support staff keep read-only access.
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        return request.user.is_manager

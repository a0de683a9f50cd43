"""
Permission classes for role-based access control.
"""

from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """
    Permission class restricting back-office endpoints to shop administrators.
    """

    message = "Access denied. Only administrators can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin())


class IsAdminOrReadOnly(IsAdminRole):
    """
    Any authenticated user may read; only administrators may write.

    Cashiers need the catalog to build carts but must not edit it.
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class CanProcessSales(permissions.BasePermission):
    """Permission class for checkout endpoints."""

    message = "Access denied. User cannot process sales."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.can_process_sales())

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allows access to users whose role is admin."""

    message = "Only administrators can do this."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin())

from rest_framework.permissions import BasePermission

from .mixins import sees_all_companies


class IsSystemAdministrator(BasePermission):
    """Allows access to superusers and users holding the system administrator role."""

    message = 'Only system administrators can perform this action.'

    def has_permission(self, request, view):
        return sees_all_companies(request.user)

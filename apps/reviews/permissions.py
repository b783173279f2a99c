from rest_framework import permissions


class IsContractor(permissions.BasePermission):
    """
    Permission: Only contractors have a review dashboard.
    """

    message = 'Only contractors can view their received reviews.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'is_contractor', False))

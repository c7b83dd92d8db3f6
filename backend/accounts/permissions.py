from rest_framework.permissions import BasePermission

from accounts.models import Role


class HasRole(BasePermission):
    """
    Allow access only to users holding ``required_role``.
    Superusers automatically pass.
    """

    required_role: str = ""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.user.is_superuser:
            return True
        return request.user.has_role(self.required_role)


class IsAdminRole(HasRole):
    required_role = Role.ADMIN


class IsAffiliator(HasRole):
    required_role = Role.AFFILIATOR


class IsMentor(HasRole):
    required_role = Role.MENTOR

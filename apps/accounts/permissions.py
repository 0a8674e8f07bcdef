from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsActiveStaff(BasePermission):
    """Authenticated and not deactivated."""

    def has_permission(self, request, view):
        u = request.user
        return bool(u and u.is_authenticated and u.is_active)


class IsAdminRole(IsActiveStaff):
    def has_permission(self, request, view):
        return bool(super().has_permission(request, view) and getattr(request.user, "role", None) == "admin")


class AdminCanDelete(IsActiveStaff):
    """Any active staff may read and write; only Admins may delete."""

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method == "DELETE":
            return getattr(request.user, "role", None) == "admin"
        return True


class ReadOnlyUnlessManager(IsActiveStaff):
    """Everyone reads; Admins and Managers write."""

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in SAFE_METHODS:
            return True
        return getattr(request.user, "role", None) in ("admin", "manager")

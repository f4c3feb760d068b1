from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access only to users with the ADMIN role."""

    message = "Accès non autorisé"

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not (u and getattr(u, "is_authenticated", False)):
            return False
        return bool(getattr(u, "is_admin", False))


class IsAdminRoleOrReadOnly(IsAdminRole):
    """Authenticated users may read; only admins may write."""

    def has_permission(self, request, view):
        u = getattr(request, "user", None)
        if not (u and getattr(u, "is_authenticated", False)):
            return False
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return super().has_permission(request, view)

from rest_framework.permissions import BasePermission


STAFF_ROLES = ("admin", "editor")


def user_is_admin(user) -> bool:
    """
    Global admin flag based on user.role (superusers always count).
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False

    if getattr(user, "is_superuser", False):
        return True

    return getattr(user, "role", None) == "admin"


def user_is_staff_member(user) -> bool:
    """
    Admins and editors manage posts and events.
    """
    if user_is_admin(user):
        return True
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return getattr(user, "role", None) in STAFF_ROLES


class IsAdminRole(BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view):
        return user_is_admin(request.user)


class IsStaffOrReadOnly(BasePermission):
    """
    SAFE methods are public; writes need an admin/editor account.
    """
    message = "Staff access required."

    def has_permission(self, request, view):
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return user_is_staff_member(request.user)

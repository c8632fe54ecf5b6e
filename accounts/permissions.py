from rest_framework.permissions import BasePermission

SAFE_METHODS = ["GET", "HEAD", "OPTIONS"]


class IsSystemAdmin(BasePermission):
    def has_permission(self, request, view):
        return request.user.is_authenticated and (
            request.user.is_system_admin or request.user.is_superuser
        )


class IsSystemAdminOrReadOnly(BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return (
            request.method in SAFE_METHODS
            or request.user.is_system_admin
            or request.user.is_superuser
        )

    def has_object_permission(self, request, view, obj):
        return (
            request.method in SAFE_METHODS
            or request.user.is_system_admin
            or request.user.is_superuser
        )


class IsSystemAdminOrOwnMember(BasePermission):
    """
    Admins see every member; a member user only sees their own records.
    The view's object must expose `member` or be a Member.
    """

    def has_permission(self, request, view):
        return request.user.is_authenticated

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_system_admin or user.is_superuser:
            return True
        member = getattr(obj, "member", obj)
        return user.member_id is not None and member.pk == user.member_id

from rest_framework import permissions


def is_staff(user):
    return bool(user and user.is_authenticated and user.is_staff)


class IsStaffUser(permissions.BasePermission):
    """
    Permission to only allow dashboard staff
    """
    message = 'Staff access required.'

    def has_permission(self, request, view):
        return is_staff(request.user)


class IsStaffOrReadOnly(permissions.BasePermission):
    """
    Anyone can read, only staff can write
    """
    message = 'Staff access required to modify this resource.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_staff(request.user)

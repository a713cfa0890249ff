from rest_framework.permissions import SAFE_METHODS, BasePermission

ROLE_OPERATOR = "ROLE_OPERATOR"
ROLE_ADMIN = "ROLE_ADMIN"


def has_any_role(user, *authorities: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False):
        return True
    checker = getattr(user, "has_any_role", None)
    return bool(checker and checker(*authorities))


class IsOperatorOrReadOnly(BasePermission):
    """Reads are public; writes need an operator or admin role."""

    message = "Operator or admin role required"

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return has_any_role(request.user, ROLE_OPERATOR, ROLE_ADMIN)


class IsAdmin(BasePermission):
    message = "Admin role required"

    def has_permission(self, request, view):
        return has_any_role(request.user, ROLE_ADMIN)

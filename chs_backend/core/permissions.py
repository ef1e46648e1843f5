"""Authorization gate for RBAC (Role-Based Access Control).

All role checks go through the single ``POLICY`` table below. Views declare
which operation each HTTP method performs via ``operations`` and use
``RBACPermission``; DRF evaluates it before any handler code runs.

Standard roles: admin, doctor, nurse, community_worker
"""

from rest_framework.permissions import BasePermission

from chs_backend.core.exceptions import Forbidden, Unauthenticated
from chs_backend.core.models import Role


# Operations missing from this table are open to every authenticated role.
POLICY: dict[str, frozenset] = {
    'visit.create': frozenset({Role.DOCTOR, Role.NURSE}),
    'patient.delete': frozenset({Role.DOCTOR, Role.ADMIN}),
}


def role_name_of(user):
    role = getattr(user, "role", None)
    return getattr(role, "name", None)


def is_permitted(role_name, operation) -> bool:
    """Return True when ``role_name`` may perform ``operation``."""
    if not role_name:
        return False
    allowed = POLICY.get(operation)
    if allowed is None:
        return True
    return role_name in allowed


def authorize(user, operation) -> None:
    """Raise Unauthenticated or Forbidden unless ``user`` may perform ``operation``."""
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthenticated()
    if not is_permitted(role_name_of(user), operation):
        raise Forbidden()


class RBACPermission(BasePermission):
    """DRF permission backed by the ``POLICY`` table.

    Views define ``operations``: a mapping of HTTP method to operation name,
    for example::

        class PatientDetailView(...):
            permission_classes = [RBACPermission]
            operations = {"GET": "patient.read", "DELETE": "patient.delete"}

    Unauthenticated requests are rejected with 401, role mismatches with 403.
    """

    message = Forbidden.default_detail

    def _operation(self, request, view):
        operations = getattr(view, "operations", None) or {}
        return operations.get(request.method)

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False

        return is_permitted(role_name_of(user), self._operation(request, view))

    def has_object_permission(self, request, view, obj):
        return True

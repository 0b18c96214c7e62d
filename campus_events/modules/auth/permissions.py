"""
Role-action matrix.

`authorize` answers only the role-level question. The scope attached to a
grant (own / own department / any) tells the calling registry which
instance-level check it still has to make.
"""

import enum
from typing import Dict, Optional

from campus_events.core.exceptions import ForbiddenError
from campus_events.models.principal import PrincipalRole


class Action(str, enum.Enum):
    EVENT_READ = "event:read"
    EVENT_CREATE = "event:create"
    EVENT_UPDATE = "event:update"
    EVENT_DELETE = "event:delete"
    EVENT_REGISTER = "event:register"
    EVENT_CANCEL = "event:cancel"
    ON_DUTY_CREATE = "on_duty:create"
    ON_DUTY_READ = "on_duty:read"
    ON_DUTY_RESOLVE = "on_duty:resolve"
    CERTIFICATE_ISSUE = "certificate:issue"
    CERTIFICATE_READ = "certificate:read"


class Scope(str, enum.Enum):
    ANY = "any"
    OWN = "own"
    OWN_DEPARTMENT = "own_department"


ROLE_PERMISSIONS: Dict[PrincipalRole, Dict[Action, Scope]] = {
    PrincipalRole.STUDENT: {
        Action.EVENT_READ: Scope.ANY,
        Action.EVENT_REGISTER: Scope.OWN,
        Action.EVENT_CANCEL: Scope.OWN,
        Action.ON_DUTY_CREATE: Scope.OWN,
        Action.ON_DUTY_READ: Scope.OWN,
        Action.CERTIFICATE_READ: Scope.OWN,
    },
    PrincipalRole.FACULTY: {
        Action.EVENT_READ: Scope.ANY,
        Action.EVENT_CREATE: Scope.OWN,
        Action.EVENT_UPDATE: Scope.OWN,
        Action.EVENT_DELETE: Scope.OWN,
        Action.ON_DUTY_READ: Scope.OWN_DEPARTMENT,
        Action.ON_DUTY_RESOLVE: Scope.OWN_DEPARTMENT,
        Action.CERTIFICATE_ISSUE: Scope.ANY,
        Action.CERTIFICATE_READ: Scope.ANY,
    },
    PrincipalRole.ADMIN: {
        Action.EVENT_READ: Scope.ANY,
        Action.EVENT_CREATE: Scope.ANY,
        Action.EVENT_UPDATE: Scope.ANY,
        Action.EVENT_DELETE: Scope.ANY,
        Action.ON_DUTY_READ: Scope.ANY,
        Action.ON_DUTY_RESOLVE: Scope.ANY,
        Action.CERTIFICATE_ISSUE: Scope.ANY,
        Action.CERTIFICATE_READ: Scope.ANY,
    },
}


def _as_role(role) -> Optional[PrincipalRole]:
    try:
        return PrincipalRole(role)
    except ValueError:
        return None


def permission_scope(role, action: Action) -> Optional[Scope]:
    """Scope granted to `role` for `action`, or None when denied"""
    principal_role = _as_role(role)
    if principal_role is None:
        return None
    return ROLE_PERMISSIONS[principal_role].get(action)


def authorize(role, action: Action) -> bool:
    """Allow/deny for a role-level action. Unknown roles are denied."""
    return permission_scope(role, action) is not None


def require_permission(role, action: Action, message: Optional[str] = None) -> Scope:
    """Return the granted scope or raise ForbiddenError"""
    scope = permission_scope(role, action)
    if scope is None:
        raise ForbiddenError(message or "Not authorized to perform this action")
    return scope

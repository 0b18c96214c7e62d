import pytest

from campus_events.core.exceptions import ForbiddenError
from campus_events.models.principal import PrincipalRole
from campus_events.modules.auth.permissions import (
    Action,
    Scope,
    authorize,
    permission_scope,
    require_permission,
)


STUDENT_ONLY = [Action.EVENT_REGISTER, Action.EVENT_CANCEL, Action.ON_DUTY_CREATE]
STAFF_ONLY = [
    Action.EVENT_CREATE,
    Action.EVENT_UPDATE,
    Action.EVENT_DELETE,
    Action.ON_DUTY_RESOLVE,
    Action.CERTIFICATE_ISSUE,
]


@pytest.mark.parametrize("role", list(PrincipalRole))
def test_everyone_reads_events(role):
    assert authorize(role, Action.EVENT_READ)


@pytest.mark.parametrize("action", STUDENT_ONLY)
def test_student_only_actions(action):
    assert authorize(PrincipalRole.STUDENT, action)
    assert not authorize(PrincipalRole.FACULTY, action)
    assert not authorize(PrincipalRole.ADMIN, action)


@pytest.mark.parametrize("action", STAFF_ONLY)
def test_staff_only_actions(action):
    assert not authorize(PrincipalRole.STUDENT, action)
    assert authorize(PrincipalRole.FACULTY, action)
    assert authorize(PrincipalRole.ADMIN, action)


def test_scopes():
    assert permission_scope(PrincipalRole.FACULTY, Action.EVENT_UPDATE) == Scope.OWN
    assert permission_scope(PrincipalRole.ADMIN, Action.EVENT_UPDATE) == Scope.ANY
    assert permission_scope(PrincipalRole.FACULTY, Action.ON_DUTY_RESOLVE) == Scope.OWN_DEPARTMENT
    assert permission_scope(PrincipalRole.ADMIN, Action.ON_DUTY_RESOLVE) == Scope.ANY
    assert permission_scope(PrincipalRole.STUDENT, Action.ON_DUTY_READ) == Scope.OWN
    assert permission_scope(PrincipalRole.STUDENT, Action.CERTIFICATE_READ) == Scope.OWN
    assert permission_scope(PrincipalRole.FACULTY, Action.CERTIFICATE_READ) == Scope.ANY


def test_role_strings_are_accepted():
    assert authorize("admin", Action.CERTIFICATE_ISSUE)
    assert not authorize("student", Action.CERTIFICATE_ISSUE)


def test_unknown_role_is_denied():
    assert not authorize("superuser", Action.EVENT_READ)


def test_require_permission_raises_with_message():
    with pytest.raises(ForbiddenError) as exc_info:
        require_permission(PrincipalRole.STUDENT, Action.EVENT_CREATE, "Not authorized to create events")

    assert exc_info.value.message == "Not authorized to create events"
    assert exc_info.value.status_code == 403

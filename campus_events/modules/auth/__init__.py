# Authentication & authorization module

from campus_events.modules.auth.credentials import CredentialVerifier
from campus_events.modules.auth.dependencies import (
    get_current_actor,
    get_optional_actor,
)
from campus_events.modules.auth.identity import Actor, load_actor
from campus_events.modules.auth.permissions import (
    Action,
    Scope,
    authorize,
    permission_scope,
    require_permission,
)

__all__ = [
    "CredentialVerifier",
    "get_current_actor",
    "get_optional_actor",
    "Actor",
    "load_actor",
    "Action",
    "Scope",
    "authorize",
    "permission_scope",
    "require_permission",
]

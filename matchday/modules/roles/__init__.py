"""
Roles module.

Holds the reactive session store and maps sessions to screen sets.

Public API:
- RoleStore: In-memory session container enforcing role invariants
- Session, BootstrapPhase, Role: Session snapshot and its enums
- ScreenSet, screen_set_for, role_label: Role-gated routing helpers
- IdentityRequiredError: Raised when roles are written without an identity
"""

from .models import BootstrapPhase, Role, Session
from .store import RoleStore, normalize_roles, roles_from_profile
from .navigation import ScreenSet, screen_set_for, role_label, canonical_role
from .exceptions import IdentityRequiredError

__all__ = [
    # Store
    "RoleStore",
    "normalize_roles",
    "roles_from_profile",
    # Models
    "BootstrapPhase",
    "Role",
    "Session",
    # Navigation
    "ScreenSet",
    "screen_set_for",
    "role_label",
    "canonical_role",
    # Exceptions
    "IdentityRequiredError",
]

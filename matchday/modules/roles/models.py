"""
Roles module data models.

The session snapshot is what the UI reads to decide which screen set to
render. It is rebuilt by the RoleStore after every mutation.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from matchday.shared.models import Identity, Profile


class Role(str, Enum):
    """Capability tags known to the client."""

    ORGANIZER = "organizer"
    TEAM = "team"
    SPECTATOR = "spectator"
    ADMIN = "admin"


class BootstrapPhase(str, Enum):
    """Where the session bootstrap currently stands."""

    INITIALIZING = "initializing"
    UNAUTHENTICATED = "unauthenticated"
    NEEDS_ROLE_SELECTION = "needs_role_selection"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class Session(BaseModel):
    """
    Immutable snapshot of the session held by the RoleStore.

    Invariants (enforced by the store, not by this model):
    - selected_role, if set, is one of roles
    - identity is None implies no profile, no roles and no selection
    """

    identity: Optional[Identity] = Field(None, description="Current identity")
    profile: Optional[Profile] = Field(None, description="Current profile")
    roles: tuple[str, ...] = Field(default=(), description="Granted roles in insertion order")
    selected_role: Optional[str] = Field(None, description="Active role")
    role_confirmed: bool = Field(
        default=False,
        description="Whether the active role was chosen or is the only option",
    )
    phase: BootstrapPhase = Field(default=BootstrapPhase.INITIALIZING)

    model_config = {"frozen": True}

    @property
    def is_signed_in(self) -> bool:
        return self.identity is not None

    @property
    def awaiting_role_choice(self) -> bool:
        """True when roles are granted but none has been settled on yet."""
        return bool(self.roles) and not self.role_confirmed

"""
Role-gated screen routing.

Maps a session snapshot to the screen set the client should show.
"""

from enum import Enum

from .models import BootstrapPhase, Role, Session


class ScreenSet(str, Enum):
    LOADING = "loading"
    AUTH = "auth"
    ROLE_SELECTION = "role_selection"
    ORGANIZER = "organizer"
    TEAM = "team"
    SPECTATOR = "spectator"
    ADMIN = "admin"


# Role names used by older signup flows
_ROLE_ALIASES = {
    "teams": Role.TEAM.value,
    "manager": Role.TEAM.value,
}

_ROLE_SCREENS = {
    Role.TEAM.value: ScreenSet.TEAM,
    Role.SPECTATOR.value: ScreenSet.SPECTATOR,
    Role.ADMIN.value: ScreenSet.ADMIN,
}

_ROLE_LABELS = {
    Role.ORGANIZER.value: "Organizer",
    Role.TEAM.value: "Team",
    Role.SPECTATOR.value: "Spectator",
    Role.ADMIN.value: "Admin",
}


def canonical_role(role: str) -> str:
    """Lowercase a role name and resolve legacy aliases."""
    key = role.strip().lower()
    return _ROLE_ALIASES.get(key, key)


def screen_set_for(session: Session) -> ScreenSet:
    """
    Decide which screen set to render.

    Organizer screens are the default for any authenticated role that has
    no dedicated screen set.
    """
    if session.phase == BootstrapPhase.INITIALIZING:
        return ScreenSet.LOADING
    if session.phase in (BootstrapPhase.UNAUTHENTICATED, BootstrapPhase.FAILED):
        return ScreenSet.AUTH
    if session.phase == BootstrapPhase.NEEDS_ROLE_SELECTION:
        return ScreenSet.ROLE_SELECTION

    role = canonical_role(session.selected_role or "")
    return _ROLE_SCREENS.get(role, ScreenSet.ORGANIZER)


def role_label(role: str) -> str:
    """Human-readable label for a role."""
    label = _ROLE_LABELS.get(canonical_role(role))
    if label:
        return label
    return role[:1].upper() + role[1:]

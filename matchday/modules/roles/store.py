"""
Reactive in-memory session store.

Holds identity, profile, granted roles, the selected role and the bootstrap
phase. Every mutation is synchronous and leaves the role invariants intact:

- the selected role is always one of the granted roles
- replacing the role set re-selects its first role when the old selection
  is gone, or clears the selection when the set is empty
- no identity means no profile, no roles and no selection

Listeners registered with ``subscribe`` receive a fresh ``Session`` snapshot
after each mutation that changed something.
"""

import logging
from typing import Callable, Iterable, Optional

from matchday.shared.models import Identity, Profile

from .exceptions import IdentityRequiredError
from .models import BootstrapPhase, Role, Session

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]


def normalize_roles(roles: Iterable[str]) -> list[str]:
    """Drop blank entries and duplicates, keeping first-seen order."""
    result: list[str] = []
    for role in roles:
        if not isinstance(role, str):
            continue
        role = role.strip()
        if role and role not in result:
            result.append(role)
    return result


def roles_from_profile(profile: Profile, default_role: Optional[str] = Role.SPECTATOR.value) -> list[str]:
    """
    Extract the granted roles from a profile record.

    Records written before multi-role support only have a singular ``role``
    field; that value becomes a one-element role list. A record with neither
    gets ``default_role``.
    """
    roles = normalize_roles(profile.roles)
    if not roles and profile.role:
        roles = normalize_roles([profile.role])
    if not roles and default_role:
        roles = [default_role]
    return roles


class RoleStore:
    """
    Single source of truth for the client session.

    The SessionController is the only writer of the phase; the UI reads
    snapshots and calls ``select_role`` when the user picks a role.
    """

    def __init__(self, default_role: Optional[str] = Role.SPECTATOR.value):
        self._default_role = default_role
        self._identity: Optional[Identity] = None
        self._profile: Optional[Profile] = None
        self._roles: list[str] = []
        self._selected_role: Optional[str] = None
        self._role_confirmed = False
        self._phase = BootstrapPhase.INITIALIZING
        self._listeners: list[SessionListener] = []

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def snapshot(self) -> Session:
        """Return an immutable copy of the current session."""
        return Session(
            identity=self._identity,
            profile=self._profile,
            roles=tuple(self._roles),
            selected_role=self._selected_role,
            role_confirmed=self._role_confirmed,
            phase=self._phase,
        )

    @property
    def phase(self) -> BootstrapPhase:
        return self._phase

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(self._roles)

    @property
    def selected_role(self) -> Optional[str]:
        return self._selected_role

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for session changes.

        Returns:
            A callable that removes the listener. Calling it twice is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_identity(self, identity: Optional[Identity]) -> None:
        """Set the signed-in identity; ``None`` resets to the logged-out state."""
        if identity is None:
            self.clear()
            return

        before = self.snapshot()
        if self._identity is not None and self._identity.id != identity.id:
            # A different account: nothing granted to the old one carries over
            self._reset_profile_state()
        self._identity = identity
        self._emit(before)

    def set_profile(self, profile: Optional[Profile]) -> None:
        """
        Ingest a profile record and derive the role set from it.

        The first role becomes selected only when nothing was selected before;
        an existing selection survives if the new role set still contains it.
        """
        before = self.snapshot()
        if profile is None:
            self._reset_profile_state()
            self._emit(before)
            return

        if self._identity is None:
            raise IdentityRequiredError("set a profile")

        self._profile = profile
        self._apply_roles(roles_from_profile(profile, self._default_role))
        self._emit(before)

    def set_roles(self, roles: Iterable[str]) -> None:
        """Replace the role set, re-selecting if the current role was removed."""
        new_roles = normalize_roles(roles)
        if new_roles and self._identity is None:
            raise IdentityRequiredError("set roles")

        before = self.snapshot()
        self._apply_roles(new_roles)
        self._emit(before)

    def select_role(self, role: str) -> bool:
        """
        Make ``role`` the active role.

        Returns:
            False, leaving the store untouched, when ``role`` is not granted.
        """
        if role not in self._roles:
            logger.debug(f"Rejected selection of ungranted role {role!r}")
            return False

        before = self.snapshot()
        self._selected_role = role
        self._role_confirmed = True
        self._emit(before)
        return True

    def add_role(self, role: str) -> None:
        """Grant ``role`` if not already granted; it becomes active if none was."""
        added = normalize_roles([role])
        if not added:
            return
        if self._identity is None:
            raise IdentityRequiredError("add a role")

        role = added[0]
        if role in self._roles:
            return

        before = self.snapshot()
        self._roles.append(role)
        if self._selected_role is None:
            self._selected_role = role
            self._role_confirmed = len(self._roles) == 1
        self._emit(before)

    def clear(self) -> None:
        """Reset to the clean logged-out state. The phase is left alone."""
        before = self.snapshot()
        self._identity = None
        self._reset_profile_state()
        self._emit(before)

    def set_phase(self, phase: BootstrapPhase) -> None:
        before = self.snapshot()
        self._phase = phase
        self._emit(before)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reset_profile_state(self) -> None:
        self._profile = None
        self._roles = []
        self._selected_role = None
        self._role_confirmed = False

    def _apply_roles(self, roles: list[str]) -> None:
        self._roles = roles
        if not roles:
            self._selected_role = None
            self._role_confirmed = False
        elif self._selected_role not in roles:
            self._selected_role = roles[0]
            self._role_confirmed = len(roles) == 1
        elif len(roles) == 1:
            self._role_confirmed = True

    def _emit(self, before: Session) -> None:
        after = self.snapshot()
        if after == before:
            return
        for listener in list(self._listeners):
            try:
                listener(after)
            except Exception:
                logger.exception("Session listener failed")

"""
Supabase Auth adapter for the identity-provider interface.
"""

import logging
from typing import Any, Callable, Optional

from supabase import Client

from matchday.shared.models import Identity

from .exceptions import IdentityChannelError, SignOutError
from .interfaces import ErrorCallback, IdentityCallback, IIdentityProvider

logger = logging.getLogger(__name__)


def identity_from_session(session: Any) -> Optional[Identity]:
    """Build an Identity from a Supabase auth session, or None if signed out."""
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return Identity(
        id=str(user.id),
        email=user.email or None,
        phone_number=getattr(user, "phone", None) or None,
    )


class SupabaseIdentityProvider(IIdentityProvider):
    """
    Delivers Supabase Auth state changes as identities.

    Supabase only reports changes after registration, so the current session
    is delivered once right after subscribing.
    """

    def __init__(self, db: Client):
        self._auth = db.auth

    def subscribe(
        self,
        on_change: IdentityCallback,
        on_error: ErrorCallback,
    ) -> Callable[[], None]:
        def listener(event: Any, session: Any) -> None:
            try:
                identity = identity_from_session(session)
            except Exception as e:
                on_error(IdentityChannelError(f"Unreadable auth session on {event}: {e}"))
                return
            logger.debug(f"Auth state change: {event}")
            on_change(identity)

        subscription = self._auth.on_auth_state_change(listener)

        try:
            current = self._auth.get_session()
        except Exception as e:
            on_error(IdentityChannelError(str(e)))
        else:
            listener("INITIAL_SESSION", current)

        return subscription.unsubscribe

    async def sign_out(self) -> None:
        try:
            self._auth.sign_out()
        except Exception as e:
            raise SignOutError(str(e)) from e

"""
Session module.

Drives the bootstrap state machine from identity-provider notifications,
reconciles identities with profiles and writes the outcome to the RoleStore.

Public API:
- SessionController, SessionHandle: Bootstrap controller and its cancellation handle
- IIdentityProvider: Interface for identity sources
- SupabaseIdentityProvider: Supabase Auth implementation
- Session exceptions: SessionAlreadyStartedError, IdentityChannelError, SignOutError
"""

from .interfaces import IIdentityProvider, Cancellable, Scheduler
from .provider import SupabaseIdentityProvider, identity_from_session
from .service import SessionController, SessionHandle, build_session_controller
from .exceptions import (
    SessionError,
    SessionAlreadyStartedError,
    IdentityChannelError,
    SignOutError,
)

__all__ = [
    # Interfaces
    "IIdentityProvider",
    "Cancellable",
    "Scheduler",
    # Implementations
    "SessionController",
    "SessionHandle",
    "SupabaseIdentityProvider",
    "identity_from_session",
    "build_session_controller",
    # Exceptions
    "SessionError",
    "SessionAlreadyStartedError",
    "IdentityChannelError",
    "SignOutError",
]

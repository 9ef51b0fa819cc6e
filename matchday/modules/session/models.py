"""
Messages consumed by the session state machine.

Identity-provider callbacks and the bootstrap timer never touch the store
directly; they post one of these to the controller's inbox and the single
consumer applies the matching transition.
"""

from dataclasses import dataclass
from typing import Optional

from matchday.shared.models import Identity


@dataclass(frozen=True)
class BootstrapStarted:
    """A new bootstrap cycle began."""


@dataclass(frozen=True)
class IdentityChanged:
    """The provider reported a signed-in identity, or None after sign-out."""

    identity: Optional[Identity]


@dataclass(frozen=True)
class ChannelFault:
    """The notification channel itself reported an error."""

    error: BaseException


@dataclass(frozen=True)
class BootstrapTimedOut:
    """No notification arrived before the bootstrap deadline."""


@dataclass(frozen=True)
class SetupFailed:
    """Subscribing to the identity provider raised."""

    error: BaseException


SessionMessage = BootstrapStarted | IdentityChanged | ChannelFault | BootstrapTimedOut | SetupFailed

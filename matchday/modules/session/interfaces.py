"""
Session module interfaces.

The controller talks to the identity provider and the clock only through
these protocols, so tests can drive both by hand.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from matchday.shared.models import Identity

IdentityCallback = Callable[[Optional[Identity]], None]
ErrorCallback = Callable[[BaseException], None]


@runtime_checkable
class IIdentityProvider(Protocol):
    """Push-style identity source with sign-out."""

    def subscribe(
        self,
        on_change: IdentityCallback,
        on_error: ErrorCallback,
    ) -> Callable[[], None]:
        """
        Start delivering identity changes.

        Args:
            on_change: Called with the current identity, or None when signed out
            on_error: Called when the channel itself fails

        Returns:
            A callable that stops delivery
        """
        ...

    async def sign_out(self) -> None:
        """
        Sign the current identity out upstream.

        Raises:
            SignOutError: If the provider rejects the request
        """
        ...


@runtime_checkable
class Cancellable(Protocol):
    def cancel(self) -> None: ...


# schedule(delay_seconds, callback) -> timer; loop.call_later fits this shape
Scheduler = Callable[[float, Callable[[], None]], Cancellable]

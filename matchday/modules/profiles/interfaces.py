"""
Profiles module interfaces.

The session controller depends on IProfileResolver; the resolver depends on
IProfileStore. Neither cares which document store sits underneath.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import ProfileResult


@runtime_checkable
class IProfileStore(Protocol):
    """Key lookup over profile records."""

    async def get_by_key(self, user_id: str) -> Optional[dict[str, Any]]:
        """
        Fetch the raw profile record for a user.

        Args:
            user_id: Identity ID the profile is keyed by

        Returns:
            The record as a dict, or None if no record exists

        Raises:
            ProfileFetchError: If the store could not be read
        """
        ...


@runtime_checkable
class IProfileResolver(Protocol):
    """Classifies a profile lookup as found, not-found or error."""

    async def resolve(self, identity_id: str) -> ProfileResult:
        """
        Resolve an identity to its profile.

        Never raises; every failure is folded into the result.
        """
        ...

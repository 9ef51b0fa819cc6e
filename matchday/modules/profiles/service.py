"""
Profile resolution service.

Turns a raw store lookup into a ProfileResult the session controller can
branch on.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from matchday.shared.database import get_supabase_client
from matchday.shared.models import Profile

from .exceptions import ProfileNotFoundError
from .interfaces import IProfileResolver, IProfileStore
from .models import ProfileResult
from .repository import SupabaseProfileRepository

logger = logging.getLogger(__name__)

_NOT_FOUND_MARKER = "not found"


class ProfileResolver(IProfileResolver):
    """
    Resolves identities to profiles.

    Classification rules:
    - store returns no record -> not-found
    - store raises ProfileNotFoundError, or any error whose message says
      "not found" -> not-found
    - any other failure, including a malformed record -> error
    """

    def __init__(self, store: IProfileStore):
        self._store = store

    async def resolve(self, identity_id: str) -> ProfileResult:
        try:
            record = await self._store.get_by_key(identity_id)
        except ProfileNotFoundError:
            return ProfileResult.not_found()
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            if _NOT_FOUND_MARKER in reason.lower():
                return ProfileResult.not_found()
            logger.warning(f"Profile fetch failed for {identity_id}: {reason}")
            return ProfileResult.error(reason)

        if record is None:
            logger.debug(f"No profile record for {identity_id}")
            return ProfileResult.not_found()

        try:
            profile = Profile.model_validate(record)
        except PydanticValidationError as e:
            logger.warning(f"Malformed profile record for {identity_id}: {e}")
            return ProfileResult.error(f"Malformed profile record: {e.error_count()} errors")

        return ProfileResult.found(profile)


# Module-level instance getter
_resolver_instance: Optional[ProfileResolver] = None


def get_profile_resolver() -> ProfileResolver:
    """Get the Supabase-backed profile resolver singleton."""
    global _resolver_instance
    if _resolver_instance is None:
        _resolver_instance = ProfileResolver(
            SupabaseProfileRepository(get_supabase_client())
        )
    return _resolver_instance


def reset_profile_resolver() -> None:
    """Reset the profile resolver singleton (for testing)."""
    global _resolver_instance
    _resolver_instance = None

"""
Profiles module.

Fetches the profile record for an identity and classifies the outcome.

Public API:
- IProfileResolver, IProfileStore: Interfaces
- ProfileResolver: Classifying resolver
- ProfileResult, ProfileStatus: Lookup outcome
- SupabaseProfileRepository, InMemoryProfileStore: Store implementations
- Profile exceptions: ProfileNotFoundError, ProfileFetchError
"""

from .interfaces import IProfileResolver, IProfileStore
from .models import ProfileResult, ProfileStatus, PROFILE_NOT_FOUND_REASON
from .repository import SupabaseProfileRepository, InMemoryProfileStore
from .service import ProfileResolver, get_profile_resolver, reset_profile_resolver
from .exceptions import ProfileNotFoundError, ProfileFetchError

__all__ = [
    # Interfaces
    "IProfileResolver",
    "IProfileStore",
    # Models
    "ProfileResult",
    "ProfileStatus",
    "PROFILE_NOT_FOUND_REASON",
    # Implementations
    "ProfileResolver",
    "SupabaseProfileRepository",
    "InMemoryProfileStore",
    "get_profile_resolver",
    "reset_profile_resolver",
    # Exceptions
    "ProfileNotFoundError",
    "ProfileFetchError",
]

"""
Profiles module exceptions.
"""

from typing import Optional

from matchday.shared.exceptions import NotFoundError, ExternalServiceError


class ProfileNotFoundError(NotFoundError):
    """Raised when no profile record exists for an identity."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )


class ProfileFetchError(ExternalServiceError):
    """Raised when the profile store could not be read."""

    def __init__(self, message: str, user_id: Optional[str] = None):
        super().__init__(
            message,
            service="supabase",
            code="PROFILE_FETCH_FAILED",
            details={"user_id": user_id} if user_id else None,
        )

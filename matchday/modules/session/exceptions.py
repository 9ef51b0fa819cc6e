"""
Session module exceptions.
"""

from matchday.shared.exceptions import MatchdayError, ExternalServiceError


class SessionError(MatchdayError):
    """Base exception for session-related errors."""

    pass


class SessionAlreadyStartedError(SessionError):
    """Raised when start() is called while a previous handle is still active."""

    def __init__(self):
        super().__init__(
            "Session observation already active; cancel the previous handle first",
            code="SESSION_ALREADY_STARTED",
        )


class IdentityChannelError(ExternalServiceError):
    """Raised or reported when the identity notification channel fails."""

    def __init__(self, message: str):
        super().__init__(message, service="supabase_auth", code="IDENTITY_CHANNEL_ERROR")


class SignOutError(ExternalServiceError):
    """Raised when the identity provider rejects a sign-out."""

    def __init__(self, message: str):
        super().__init__(message, service="supabase_auth", code="SIGN_OUT_FAILED")

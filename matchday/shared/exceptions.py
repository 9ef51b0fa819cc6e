"""
Error taxonomy for the Matchday session core.

None of these errors reach the UI. The session controller and the activity
aggregator catch them, log them and turn them into a phase change or an
empty result. Modules subclass the categories below.
"""

from typing import Optional, Any


class MatchdayError(Exception):
    """
    Root of every Matchday error.

    Carries a stable ``code`` for log filtering and free-form ``details``.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Structured form for log records."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(MatchdayError):
    """A keyed record (profile, activity row) does not exist."""


class ValidationError(MatchdayError):
    """A store mutation or input broke a session invariant."""


class ExternalServiceError(MatchdayError):
    """
    Supabase (auth or PostgREST) failed or rejected a request.

    ``service`` names the failing backend and is copied into ``details``.
    """

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service

"""
Activity module exceptions.
"""

from typing import Optional

from matchday.shared.exceptions import ExternalServiceError


class ActivityQueryError(ExternalServiceError):
    """Raised when an activity query fails."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(
            message,
            service="supabase",
            code=code or "ACTIVITY_QUERY_FAILED",
            details=details,
        )


class MissingIndexError(ActivityQueryError):
    """
    Raised when a query cannot run as written.

    Covers a missing index, an unknown ordering column, or any other
    precondition the store rejects. An unordered query may still succeed.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, code="MISSING_INDEX", details=details)

"""
Roles module exceptions.
"""

from matchday.shared.exceptions import ValidationError


class IdentityRequiredError(ValidationError):
    """Raised when roles or a profile are written while nobody is signed in."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation} without an identity",
            code="IDENTITY_REQUIRED",
            details={"operation": operation},
        )

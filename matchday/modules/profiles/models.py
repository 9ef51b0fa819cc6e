"""
Profiles module data models.

A profile lookup has three outcomes, and the session controller branches on
which one it got. Telling "deleted profile" apart from "could not fetch"
is what keeps ghost users from being let in and keeps real users from
being signed out by a network glitch.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from matchday.shared.models import Profile

# Reason carried by every not-found result
PROFILE_NOT_FOUND_REASON = "User not found"


class ProfileStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class ProfileResult(BaseModel):
    """Outcome of resolving an identity to its profile record."""

    status: ProfileStatus = Field(..., description="Outcome classification")
    profile: Optional[Profile] = Field(None, description="Profile when found")
    reason: Optional[str] = Field(None, description="Why no profile was returned")

    model_config = {"frozen": True}

    @classmethod
    def found(cls, profile: Profile) -> "ProfileResult":
        return cls(status=ProfileStatus.FOUND, profile=profile)

    @classmethod
    def not_found(cls) -> "ProfileResult":
        return cls(status=ProfileStatus.NOT_FOUND, reason=PROFILE_NOT_FOUND_REASON)

    @classmethod
    def error(cls, reason: str) -> "ProfileResult":
        return cls(status=ProfileStatus.ERROR, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status == ProfileStatus.FOUND

    @property
    def is_not_found(self) -> bool:
        return self.status == ProfileStatus.NOT_FOUND

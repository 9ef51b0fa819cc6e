"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


class Identity(BaseModel):
    """
    External identity record issued by the identity provider.

    Read on every auth notification and never mutated by the session core.
    """

    id: str = Field(..., description="User ID (UUID from Supabase Auth)")
    email: Optional[str] = Field(None, description="User's email address")
    phone_number: Optional[str] = Field(None, description="User's phone number")

    model_config = {
        "frozen": True,  # Owned by the identity provider
        "extra": "ignore",
    }


class Profile(BaseModel):
    """
    Application-level user record keyed by identity id.

    Owned by the document store and never mutated by the session core.
    Older records carry a singular ``role`` instead of ``roles``; the
    session store folds it in when the profile is ingested.
    """

    roles: list[str] = Field(default_factory=list, description="Granted roles in order")
    role: Optional[str] = Field(None, description="Legacy singular role")
    display_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("display_name", "displayName"),
        description="Display name",
    )
    email: Optional[str] = Field(None, description="Contact email")
    phone: Optional[str] = Field(None, description="Contact phone")

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("roles", mode="before")
    @classmethod
    def coerce_roles(cls, value: Any) -> Any:
        """Accept a bare string or null where a list of roles is expected."""
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

"""
Activity module data models.

Activity records are append-only rows written on auth events. Rows from
older exports use camelCase keys, so both spellings are accepted.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from dateutil.parser import isoparse
from pydantic import AliasChoices, BaseModel, Field, field_validator


class ActivityType(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    LOGOUT = "logout"
    ROLE_CHANGE = "role_change"


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts datetimes, dates (midnight UTC) and ISO 8601 strings.
    Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return as_utc(isoparse(value))
        except (ValueError, OverflowError):
            return None
    return None


class ActivityRecord(BaseModel):
    """A single user activity event."""

    id: str = Field(..., description="Record ID")
    user_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("user_id", "userId"),
        description="Identity the event belongs to",
    )
    email: Optional[str] = Field(None, description="Email at the time of the event")
    activity_type: str = Field(
        ...,
        validation_alias=AliasChoices("activity_type", "activityType"),
        description="login, signup, logout or role_change",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = Field(None, description="Server timestamp")
    created_at: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        description="Client creation time as an ISO string",
    )

    model_config = {"extra": "ignore", "populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def coerce_metadata(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value

    @property
    def contact_email(self) -> Optional[str]:
        """Email on the record, falling back to the one in metadata."""
        return self.email or self.metadata.get("email") or None

    @property
    def effective_time(self) -> Optional[datetime]:
        """Server timestamp if present, otherwise the parsed creation string."""
        if self.timestamp is not None:
            return as_utc(self.timestamp)
        return parse_timestamp(self.created_at)


class DailyActivityCounts(BaseModel):
    logins: int = 0
    signups: int = 0
    logouts: int = 0


class ActivityStats(BaseModel):
    """Aggregate activity statistics, recomputed on every request."""

    total_logins: int = Field(default=0)
    total_signups: int = Field(default=0)
    total_logouts: int = Field(default=0)
    unique_users: int = Field(default=0, description="Distinct user IDs")
    by_date: dict[str, DailyActivityCounts] = Field(
        default_factory=dict,
        description="Per-type counts keyed by UTC date (YYYY-MM-DD)",
    )

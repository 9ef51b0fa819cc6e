"""
Shared infrastructure for the Matchday session core.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Identity and Profile records shared by all modules

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    MatchdayError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
)
from .models import Identity, Profile

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "MatchdayError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "Identity",
    "Profile",
]

"""
Database client factory for Supabase.

The session core runs on the end user's device, so the client is built with
the anon key and every query is subject to Row Level Security.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get the shared Supabase client.

    The same client backs the identity provider (``client.auth``) and the
    document store (``client.table``).

    Returns:
        Supabase client configured with the anon key

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_ANON_KEY is not set
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _client
    _client = None

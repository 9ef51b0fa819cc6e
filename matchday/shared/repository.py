"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods and translate
    client errors into module exceptions.

    Example:
        class ProfileRepository(BaseRepository[dict]):
            async def get_by_key(self, user_id: str) -> Optional[dict]:
                result = self._db.table("users").select("*").eq("id", user_id).execute()
                return result.data[0] if result.data else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

"""
Profile record access.

Profiles live in the ``users`` table, one row per identity, keyed by ``id``.
The supabase-py client is synchronous; its calls run on the event loop,
which a single-user client tolerates.
"""

from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from matchday.shared.config import get_settings
from matchday.shared.repository import BaseRepository

from .exceptions import ProfileFetchError


class SupabaseProfileRepository(BaseRepository[dict]):
    """
    Reads profile rows from Supabase.

    Row Level Security limits a signed-in user to their own row, so a
    missing row and a row hidden by policy both come back empty.
    """

    def __init__(self, db: Client, table: Optional[str] = None) -> None:
        super().__init__(db)
        self._table = table or get_settings().profiles_table

    async def get_by_key(self, user_id: str) -> Optional[dict[str, Any]]:
        """Fetch the profile row for ``user_id``, or None if there is none."""
        try:
            result = (
                self._db.table(self._table)
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise ProfileFetchError(e.message or str(e), user_id=user_id) from e

        if not result.data:
            return None
        return result.data[0]


class InMemoryProfileStore:
    """
    Profile store backed by a dict.

    For testing and local development without a Supabase project.
    """

    def __init__(self, records: Optional[dict[str, dict[str, Any]]] = None):
        self._records: dict[str, dict[str, Any]] = dict(records or {})

    def put(self, user_id: str, record: dict[str, Any]) -> None:
        self._records[user_id] = record

    def delete(self, user_id: str) -> None:
        self._records.pop(user_id, None)

    async def get_by_key(self, user_id: str) -> Optional[dict[str, Any]]:
        record = self._records.get(user_id)
        return dict(record) if record is not None else None

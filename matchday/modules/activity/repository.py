"""
Activity record access.

Rows live in the ``user_activity`` table. The supabase-py client is
synchronous; its calls run on the event loop, which a single-user client
tolerates.
"""

import uuid
from typing import Any, Callable, Optional

from postgrest.exceptions import APIError
from supabase import Client

from matchday.shared.config import get_settings
from matchday.shared.repository import BaseRepository

from .exceptions import ActivityQueryError, MissingIndexError

# Postgres errors where the query shape, not the store, is the problem:
# undefined column (ordering on a missing column) and statement timeout
# (sorting a large table without an index).
_PRECONDITION_CODES = {"42703", "57014"}


def classify_api_error(error: APIError) -> ActivityQueryError:
    """Map a PostgREST error to MissingIndexError or ActivityQueryError."""
    message = error.message or str(error)
    details = {"postgres_code": error.code} if error.code else None
    if error.code in _PRECONDITION_CODES or "index" in message.lower():
        return MissingIndexError(message, details=details)
    return ActivityQueryError(message, details=details)


class SupabaseActivityRepository(BaseRepository[dict]):
    """
    Reads and appends activity rows in Supabase.

    Queries without a limit are read page by page with ``.range()``, since
    PostgREST caps a single response at the server's max-rows setting.
    """

    def __init__(
        self,
        db: Client,
        table: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> None:
        super().__init__(db)
        settings = get_settings()
        self._table = table or settings.activity_table
        self._page_size = page_size or settings.activity_page_size

    async def query_ordered(
        self,
        order_by: str,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        return self._read(lambda: self._select(filters).order(order_by, desc=True), limit)

    async def query_unordered(
        self,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        return self._read(lambda: self._select(filters), limit)

    async def append(self, row: dict[str, Any]) -> dict[str, Any]:
        result = self._execute(self._db.table(self._table).insert(row))
        return result[0] if result else row

    def _select(self, filters: Optional[dict[str, Any]]):
        query = self._db.table(self._table).select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    def _read(self, build_query: Callable[[], Any], limit: Optional[int]) -> list[dict[str, Any]]:
        if limit is not None:
            return self._execute(build_query().limit(limit))

        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            page = self._execute(build_query().range(offset, offset + self._page_size - 1))
            rows.extend(page)
            if len(page) < self._page_size:
                return rows
            offset += self._page_size

    def _execute(self, query) -> list[dict[str, Any]]:
        try:
            result = query.execute()
        except APIError as e:
            raise classify_api_error(e) from e
        return result.data or []


class InMemoryActivityStore:
    """
    Activity store backed by a list.

    For testing and local development. ``ordered_error`` and
    ``unordered_error`` make the matching query raise, to exercise the
    fallback paths.
    """

    def __init__(
        self,
        rows: Optional[list[dict[str, Any]]] = None,
        ordered_error: Optional[Exception] = None,
        unordered_error: Optional[Exception] = None,
    ):
        self._rows: list[dict[str, Any]] = [dict(r) for r in rows or []]
        self.ordered_error = ordered_error
        self.unordered_error = unordered_error
        self.calls: list[tuple[str, Optional[int]]] = []

    @property
    def rows(self) -> list[dict[str, Any]]:
        return [dict(r) for r in self._rows]

    async def query_ordered(
        self,
        order_by: str,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        self.calls.append(("ordered", limit))
        if self.ordered_error is not None:
            raise self.ordered_error
        rows = sorted(
            self._matching(filters),
            key=lambda r: (r.get(order_by) is not None, str(r.get(order_by) or "")),
            reverse=True,
        )
        return rows[:limit] if limit is not None else rows

    async def query_unordered(
        self,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        self.calls.append(("unordered", limit))
        if self.unordered_error is not None:
            raise self.unordered_error
        rows = self._matching(filters)
        return rows[:limit] if limit is not None else rows

    async def append(self, row: dict[str, Any]) -> dict[str, Any]:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        self._rows.append(stored)
        return dict(stored)

    def _matching(self, filters: Optional[dict[str, Any]]) -> list[dict[str, Any]]:
        filters = filters or {}
        return [
            dict(r) for r in self._rows
            if all(r.get(k) == v for k, v in filters.items())
        ]

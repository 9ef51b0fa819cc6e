"""
Activity module interfaces.
"""

from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from .models import ActivityRecord, ActivityStats


@runtime_checkable
class IActivityStore(Protocol):
    """
    Query and append access to activity rows.

    Both query methods may raise MissingIndexError when the store rejects
    the query shape, or ActivityQueryError for any other failure.
    """

    async def query_ordered(
        self,
        order_by: str,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """Newest-first rows ordered by ``order_by``, at most ``limit`` of them."""
        ...

    async def query_unordered(
        self,
        limit: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """Rows in store order; ``limit=None`` returns all of them."""
        ...

    async def append(self, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored."""
        ...


@runtime_checkable
class IActivityAggregator(Protocol):
    """Read model for the admin activity dashboard."""

    async def list_by_type(
        self,
        activity_type: str,
        limit_count: Optional[int] = None,
    ) -> list[ActivityRecord]:
        """
        Most recent records of one type.

        Never raises; returns an empty list when the store is unavailable.
        """
        ...

    async def compute_stats(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Optional[ActivityStats]:
        """
        Aggregate counts over ``[start_date, end_date)``.

        Returns None when the store is unavailable.
        """
        ...

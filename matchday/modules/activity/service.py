"""
Activity aggregation service.

Backs the admin activity dashboard: recent events by type, one user's
history, and statistics grouped by day. Store failures degrade to empty
lists or ``None`` statistics instead of raising.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from matchday.shared.config import Settings, get_settings
from matchday.shared.database import get_supabase_client

from .interfaces import IActivityAggregator, IActivityStore
from .models import (
    ActivityRecord,
    ActivityStats,
    ActivityType,
    DailyActivityCounts,
    parse_timestamp,
)
from .repository import SupabaseActivityRepository
from .strategy import FallbackQueryPlan, QueryAttempt, RecordPredicate, parse_records

logger = logging.getLogger(__name__)

DateBound = Union[datetime, date]

# ActivityStats counter attributes for each counted type
_TOTAL_FIELDS = {
    ActivityType.LOGIN.value: "total_logins",
    ActivityType.SIGNUP.value: "total_signups",
    ActivityType.LOGOUT.value: "total_logouts",
}
_DAILY_FIELDS = {
    ActivityType.LOGIN.value: "logins",
    ActivityType.SIGNUP.value: "signups",
    ActivityType.LOGOUT.value: "logouts",
}


def has_identity(record: ActivityRecord) -> bool:
    """A listable record names a user and carries an email somewhere."""
    return bool(record.user_id) and bool(record.contact_email)


class ActivityAggregator(IActivityAggregator):
    """
    Reads activity records and computes dashboard statistics.

    Lists use a two-attempt FallbackQueryPlan: an ordered over-fetch first,
    then a wider unordered fetch if the store rejects the ordering.
    """

    def __init__(self, store: IActivityStore, settings: Optional[Settings] = None):
        self._store = store
        self._settings = settings or get_settings()

    def build_plan(
        self,
        predicate: RecordPredicate,
        filters: Optional[dict[str, Any]] = None,
    ) -> FallbackQueryPlan:
        """Ordered-then-unordered plan applying ``predicate`` to the rows."""
        order_by = self._settings.activity_order_column

        async def ordered(limit: int) -> list[dict[str, Any]]:
            return await self._store.query_ordered(order_by, limit, filters)

        async def unordered(limit: int) -> list[dict[str, Any]]:
            return await self._store.query_unordered(limit, filters)

        return FallbackQueryPlan(
            [
                QueryAttempt("ordered", ordered, self._settings.activity_primary_overfetch),
                QueryAttempt("unordered", unordered, self._settings.activity_fallback_overfetch),
            ],
            predicate,
        )

    async def list_by_type(
        self,
        activity_type: Union[str, ActivityType],
        limit_count: Optional[int] = None,
    ) -> list[ActivityRecord]:
        """Most recent records of ``activity_type`` that name a user and an email."""
        wanted = activity_type.value if isinstance(activity_type, ActivityType) else activity_type
        if limit_count is None:
            limit_count = self._settings.activity_default_limit

        plan = self.build_plan(lambda r: r.activity_type == wanted and has_identity(r))
        records = await plan.run(limit_count)
        logger.debug(f"Found {len(records)} {wanted} records")
        return records

    async def list_for_user(self, user_id: str, limit_count: int = 50) -> list[ActivityRecord]:
        """One user's most recent records of any type."""
        plan = self.build_plan(lambda r: r.user_id == user_id, filters={"user_id": user_id})
        return await plan.run(limit_count)

    async def compute_stats(
        self,
        start_date: Optional[DateBound] = None,
        end_date: Optional[DateBound] = None,
    ) -> Optional[ActivityStats]:
        """
        Aggregate every record whose effective time is in ``[start_date, end_date)``.

        Records without a usable timestamp are left out. Returns None if the
        store cannot be read.
        """
        start = parse_timestamp(start_date)
        end = parse_timestamp(end_date)

        try:
            rows = await self._store.query_unordered(None)
        except Exception as e:
            logger.error(f"Could not load activity records for statistics: {e}")
            return None

        stats = ActivityStats()
        users: set[str] = set()

        for record in parse_records(rows):
            moment = record.effective_time
            if moment is None:
                continue
            if start is not None and moment < start:
                continue
            if end is not None and moment >= end:
                continue

            if record.user_id:
                users.add(record.user_id)

            # Every in-range day gets a bucket, even if nothing in it is counted
            day = stats.by_date.setdefault(moment.date().isoformat(), DailyActivityCounts())

            total_field = _TOTAL_FIELDS.get(record.activity_type)
            if total_field is None:
                continue
            setattr(stats, total_field, getattr(stats, total_field) + 1)

            daily_field = _DAILY_FIELDS[record.activity_type]
            setattr(day, daily_field, getattr(day, daily_field) + 1)

        stats.unique_users = len(users)
        return stats

    async def log_activity(
        self,
        user_id: str,
        email: Optional[str],
        activity_type: Union[str, ActivityType],
        metadata: Optional[dict[str, Any]] = None,
    ) -> Optional[ActivityRecord]:
        """
        Append an activity record stamped with the current time.

        Store failures are logged and reported as None.

        Raises:
            ValueError: If activity_type is not a known ActivityType
        """
        now = datetime.now(timezone.utc)
        row = {
            "user_id": user_id,
            "email": email,
            "activity_type": ActivityType(activity_type).value,
            "metadata": metadata or {},
            "timestamp": now.isoformat(),
            "created_at": now.isoformat(),
        }
        try:
            saved = await self._store.append(row)
            return ActivityRecord.model_validate(saved)
        except Exception:
            logger.exception(f"Failed to log {row['activity_type']} activity for {user_id}")
            return None


# Module-level instance getter
_aggregator_instance: Optional[ActivityAggregator] = None


def get_activity_aggregator() -> ActivityAggregator:
    """Get the Supabase-backed activity aggregator singleton."""
    global _aggregator_instance
    if _aggregator_instance is None:
        _aggregator_instance = ActivityAggregator(
            SupabaseActivityRepository(get_supabase_client())
        )
    return _aggregator_instance


def reset_activity_aggregator() -> None:
    """Reset the activity aggregator singleton (for testing)."""
    global _aggregator_instance
    _aggregator_instance = None

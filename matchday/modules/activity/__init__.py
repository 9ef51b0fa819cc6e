"""
Activity module.

Reads user activity records for the admin dashboard and computes
statistics grouped by day.

Public API:
- IActivityAggregator, IActivityStore: Interfaces
- ActivityAggregator: Lists and statistics with degraded fallbacks
- FallbackQueryPlan, QueryAttempt: Ordered query attempts with shared post-filter
- ActivityRecord, ActivityStats, DailyActivityCounts, ActivityType: Models
- SupabaseActivityRepository, InMemoryActivityStore: Store implementations
- Activity exceptions: ActivityQueryError, MissingIndexError
"""

from .interfaces import IActivityAggregator, IActivityStore
from .models import (
    ActivityRecord,
    ActivityStats,
    ActivityType,
    DailyActivityCounts,
    parse_timestamp,
)
from .strategy import FallbackQueryPlan, QueryAttempt
from .repository import SupabaseActivityRepository, InMemoryActivityStore
from .service import (
    ActivityAggregator,
    get_activity_aggregator,
    reset_activity_aggregator,
)
from .exceptions import ActivityQueryError, MissingIndexError

__all__ = [
    # Interfaces
    "IActivityAggregator",
    "IActivityStore",
    # Models
    "ActivityRecord",
    "ActivityStats",
    "ActivityType",
    "DailyActivityCounts",
    "parse_timestamp",
    # Query plan
    "FallbackQueryPlan",
    "QueryAttempt",
    # Implementations
    "ActivityAggregator",
    "SupabaseActivityRepository",
    "InMemoryActivityStore",
    "get_activity_aggregator",
    "reset_activity_aggregator",
    # Exceptions
    "ActivityQueryError",
    "MissingIndexError",
]

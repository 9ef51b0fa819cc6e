"""
Fallback query plan for activity lists.

Filtering by activity type on the server would need a compound index per
type, so lists are built by over-fetching recent rows and filtering on the
client. A plan is an ordered list of query attempts sharing one
post-processing step:

    fetch (limit x overfetch) -> parse -> filter -> sort newest first -> truncate

The next attempt runs only when the previous one failed with
MissingIndexError. Any other failure, or running out of attempts, yields
an empty list.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Sequence

from pydantic import ValidationError as PydanticValidationError

from .exceptions import MissingIndexError
from .models import ActivityRecord

logger = logging.getLogger(__name__)

RecordPredicate = Callable[[ActivityRecord], bool]
RowFetcher = Callable[[int], Awaitable[list[dict[str, Any]]]]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class QueryAttempt:
    """One way of fetching candidate rows."""

    name: str
    fetch: RowFetcher
    overfetch: int = 1


def parse_records(rows: Iterable[dict[str, Any]]) -> list[ActivityRecord]:
    """Validate raw rows, skipping any that are not activity records."""
    records = []
    for row in rows:
        try:
            records.append(ActivityRecord.model_validate(row))
        except PydanticValidationError as e:
            logger.debug(f"Skipping malformed activity row {row.get('id')!r}: {e.error_count()} errors")
    return records


def newest_first(records: Iterable[ActivityRecord]) -> list[ActivityRecord]:
    """Sort by effective time, newest first; records without one go last."""
    return sorted(records, key=lambda r: r.effective_time or _EPOCH, reverse=True)


class FallbackQueryPlan:
    """Runs query attempts in order until one succeeds."""

    def __init__(self, attempts: Sequence[QueryAttempt], predicate: RecordPredicate):
        if not attempts:
            raise ValueError("A query plan needs at least one attempt")
        self._attempts = list(attempts)
        self._predicate = predicate

    def finalize(self, rows: Iterable[dict[str, Any]], limit_count: int) -> list[ActivityRecord]:
        """Shared post-processing applied to whichever attempt succeeded."""
        matching = [r for r in parse_records(rows) if self._predicate(r)]
        return newest_first(matching)[:limit_count]

    async def run(self, limit_count: int) -> list[ActivityRecord]:
        if limit_count <= 0:
            return []

        for attempt in self._attempts:
            fetch_size = limit_count * attempt.overfetch
            try:
                rows = await attempt.fetch(fetch_size)
            except MissingIndexError as e:
                logger.warning(f"Activity query '{attempt.name}' rejected ({e.message}); trying next")
                continue
            except Exception as e:
                logger.error(f"Activity query '{attempt.name}' failed: {e}")
                return []

            records = self.finalize(rows, limit_count)
            logger.debug(
                f"Activity query '{attempt.name}' fetched {len(rows)} rows, "
                f"kept {len(records)}"
            )
            return records

        logger.error("All activity query attempts failed")
        return []

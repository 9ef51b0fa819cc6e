"""Tests for the fallback query plan."""

import pytest

from matchday.modules.activity.exceptions import ActivityQueryError, MissingIndexError
from matchday.modules.activity.models import ActivityRecord
from matchday.modules.activity.strategy import (
    FallbackQueryPlan,
    QueryAttempt,
    newest_first,
    parse_records,
)


def fetcher(rows=None, error=None, log=None, name=None):
    async def fetch(limit):
        if log is not None:
            log.append((name, limit))
        if error is not None:
            raise error
        return rows or []
    return fetch


ROWS = [
    {"id": "1", "activity_type": "login", "created_at": "2024-01-01"},
    {"id": "2", "activity_type": "login", "created_at": "2024-01-03"},
    {"id": "3", "activity_type": "logout", "created_at": "2024-01-02"},
]


def is_login(record):
    return record.activity_type == "login"


class TestParseRecords:
    def test_skips_malformed_rows(self):
        """Rows missing required fields are dropped."""
        records = parse_records([{"id": "1"}, {"id": "2", "activity_type": "login"}])
        assert [r.id for r in records] == ["2"]

    def test_newest_first_puts_untimed_last(self):
        """Records without a time sort after everything else."""
        records = parse_records([
            {"id": "none", "activity_type": "login"},
            {"id": "old", "activity_type": "login", "created_at": "2020-01-01"},
            {"id": "new", "activity_type": "login", "created_at": "2024-01-01"},
        ])
        assert [r.id for r in newest_first(records)] == ["new", "old", "none"]


class TestFallbackQueryPlan:
    def test_requires_attempts(self):
        """An empty plan is rejected."""
        with pytest.raises(ValueError):
            FallbackQueryPlan([], is_login)

    @pytest.mark.asyncio
    async def test_first_attempt_wins(self):
        """Later attempts are not run when the first succeeds."""
        log = []
        plan = FallbackQueryPlan(
            [
                QueryAttempt("primary", fetcher(ROWS, log=log, name="primary"), 3),
                QueryAttempt("fallback", fetcher(ROWS, log=log, name="fallback"), 5),
            ],
            is_login,
        )

        records = await plan.run(1)

        assert log == [("primary", 3)]
        assert [r.id for r in records] == ["2"]

    @pytest.mark.asyncio
    async def test_missing_index_moves_on(self):
        """MissingIndexError triggers the next attempt with its own over-fetch."""
        log = []
        plan = FallbackQueryPlan(
            [
                QueryAttempt("primary", fetcher(error=MissingIndexError("no index"), log=log, name="primary"), 3),
                QueryAttempt("fallback", fetcher(ROWS, log=log, name="fallback"), 5),
            ],
            is_login,
        )

        records = await plan.run(2)

        assert log == [("primary", 6), ("fallback", 10)]
        assert [r.id for r in records] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_other_errors_stop_the_plan(self):
        """Non-precondition errors end the plan with no results."""
        log = []
        plan = FallbackQueryPlan(
            [
                QueryAttempt("primary", fetcher(error=ActivityQueryError("denied"), log=log, name="primary")),
                QueryAttempt("fallback", fetcher(ROWS, log=log, name="fallback")),
            ],
            is_login,
        )

        assert await plan.run(5) == []
        assert log == [("primary", 5)]

    @pytest.mark.asyncio
    async def test_exhausted_plan_returns_empty(self):
        """Running out of attempts yields an empty list."""
        plan = FallbackQueryPlan(
            [QueryAttempt("only", fetcher(error=MissingIndexError("no index")))],
            is_login,
        )
        assert await plan.run(5) == []

    @pytest.mark.asyncio
    async def test_non_positive_limit(self):
        """A zero limit returns nothing without querying."""
        log = []
        plan = FallbackQueryPlan([QueryAttempt("only", fetcher(ROWS, log=log))], is_login)
        assert await plan.run(0) == []
        assert log == []

    def test_finalize_filters_sorts_truncates(self):
        """finalize applies the predicate, sorts newest first and truncates."""
        plan = FallbackQueryPlan([QueryAttempt("only", fetcher())], is_login)
        records = plan.finalize(ROWS, 5)
        assert all(isinstance(r, ActivityRecord) for r in records)
        assert [r.id for r in records] == ["2", "1"]

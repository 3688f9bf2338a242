"""
Tests for stats and breakdown aggregation.
"""

import pytest

from ojtlog.domain.errors import InvalidTarget
from ojtlog.domain.models import Category, Stats
from ojtlog.services.aggregation import (
    compute_stats, category_breakdown, category_percentages, days_remaining,
    monthly_breakdown, entry_hours, month_key,
)
from conftest import make_entry, make_task, ten_minute_tasks


def test_scenario_stats(scenario_entries):
    """Two entries on one day, 8 hours against a 100 hour target."""
    stats = compute_stats(scenario_entries, 100)

    assert stats.completed_hours == 8
    assert stats.remaining_hours == 92
    assert stats.progress_percentage == 8.0
    assert stats.entries_count == 2
    assert stats.required_hours == 100


def test_empty_entries_give_zero_stats():
    stats = compute_stats([], 500)
    assert stats.completed_hours == 0
    assert stats.remaining_hours == 500
    assert stats.progress_percentage == 0
    assert stats.entries_count == 0


def test_progress_clamped_when_target_exceeded():
    entries = [make_entry("2024-05-01", make_task("08:00", "20:00"))]
    stats = compute_stats(entries, 10)

    assert stats.progress_percentage == 100
    assert stats.remaining_hours == 0


@pytest.mark.parametrize("required", [0, -5, None])
def test_non_positive_target_rejected(required):
    with pytest.raises(InvalidTarget):
        compute_stats([], required)


def test_totals_recomputed_after_task_removal(scenario_entries):
    """Dropping a task in memory is reflected even though total_hours was set earlier."""
    entry = scenario_entries[0]
    entry.tasks.pop()

    assert entry_hours(entry) == 3
    assert compute_stats(scenario_entries, 100).completed_hours == 4


def test_category_breakdown(scenario_entries):
    breakdown = category_breakdown(scenario_entries)

    assert breakdown == {
        "Learning": 4,
        "Development/Coding": 3,
        "Meeting": 1,
    }
    # Largest first
    assert list(breakdown) == ["Learning", "Development/Coding", "Meeting"]


def test_category_breakdown_has_no_zero_fill(scenario_entries):
    breakdown = category_breakdown(scenario_entries)
    assert Category.RESEARCH.value not in breakdown
    assert category_breakdown([]) == {}


def test_monthly_breakdown_uses_entry_date():
    entries = [
        make_entry("2024-04-30", make_task("09:00", "11:00")),
        make_entry("2024-05-01", make_task("09:00", "10:00")),
        make_entry("2024-05-31", make_task("09:00", "12:00")),
        make_entry("2023-12-15", make_task("09:00", "10:30")),
    ]
    breakdown = monthly_breakdown(entries)

    assert breakdown == {"May 2024": 4, "Apr 2024": 2, "Dec 2023": 1.5}
    assert list(breakdown) == ["May 2024", "Apr 2024", "Dec 2023"]


def test_month_key():
    from datetime import date
    assert month_key(date(2024, 1, 31)) == "Jan 2024"


def test_minute_tasks_total_exactly_one_hour():
    """Six 10 minute tasks are one hour, not a rounded-up 1.02."""
    entries = [make_entry("2024-05-01", *ten_minute_tasks())]
    stats = compute_stats(entries, 100)

    assert entry_hours(entries[0]) == 1.0
    assert stats.completed_hours == 1.0
    assert monthly_breakdown(entries) == {"May 2024": 1.0}
    assert category_breakdown(entries) == {"Development/Coding": 1.0}


def _stats(completed, remaining, entries_count):
    return Stats(
        required_hours=completed + remaining,
        completed_hours=completed,
        remaining_hours=remaining,
        progress_percentage=0,
        entries_count=entries_count,
    )


@pytest.mark.parametrize("completed, remaining, count, expected", [
    (8, 92, 1, 12),      # 92 / 8 = 11.5 -> 12
    (16, 84, 2, 11),     # 84 / 8 = 10.5 -> 11
    (40, 60, 5, 8),      # 60 / 8 = 7.5 -> 8
    (0, 500, 0, 500),    # nothing logged, one hour per day
    (100, 0, 12, 0),     # target reached
])
def test_days_remaining(completed, remaining, count, expected):
    assert days_remaining(_stats(completed, remaining, count)) == expected


def test_category_percentages(scenario_entries):
    breakdown = category_breakdown(scenario_entries)
    shares = category_percentages(breakdown, 8)

    assert shares == {"Learning": 50.0, "Development/Coding": 37.5, "Meeting": 12.5}
    assert list(shares) == list(breakdown)


def test_category_percentages_without_hours():
    assert category_percentages({}, 0) == {}
    assert category_percentages({"Learning": 0.0}, 0) == {"Learning": 0.0}

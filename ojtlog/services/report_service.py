"""
Progress Report Service.

The single place where an owner's stats are loaded: entries and settings are
fetched, then everything is recomputed from the tasks.
"""

from typing import Dict, Optional

from pydantic import BaseModel

from ojtlog.domain.models import Stats, TrainingSettings
from ojtlog.domain.timecalc import format_days_hours_minutes
from ojtlog.infra.repository import EntryRepository, SettingsRepository
from ojtlog.services.aggregation import (
    compute_stats, category_breakdown, category_percentages, days_remaining, monthly_breakdown,
)


class ProgressReport(BaseModel):
    settings: TrainingSettings
    stats: Stats
    category_breakdown: Dict[str, float]
    category_percentages: Dict[str, float]
    monthly_breakdown: Dict[str, float]
    completed_label: str
    remaining_label: str
    days_remaining: int


class ReportService:
    """
    Builds the dashboard/report numbers for one owner.
    """

    def __init__(self, entry_repo: Optional[EntryRepository] = None,
                 settings_repo: Optional[SettingsRepository] = None):
        self.entry_repo = entry_repo or EntryRepository()
        self.settings_repo = settings_repo or SettingsRepository()

    async def build(self, owner_id: str) -> ProgressReport:
        settings = await self.settings_repo.get_or_create(owner_id)
        entries = await self.entry_repo.list_for_owner(owner_id)

        stats = compute_stats(entries, settings.required_hours)
        categories = category_breakdown(entries)

        return ProgressReport(
            settings=settings,
            stats=stats,
            category_breakdown=categories,
            category_percentages=category_percentages(categories, stats.completed_hours),
            monthly_breakdown=monthly_breakdown(entries),
            completed_label=format_days_hours_minutes(stats.completed_hours),
            remaining_label=format_days_hours_minutes(stats.remaining_hours),
            days_remaining=days_remaining(stats),
        )

"""Immutable data snapshot with cached indexes - no I/O dependencies.

Callers that issue many queries against the same data (a 91-day heatmap,
a list of streaks) should go through a Snapshot so the log and activity
indexes are built once.
"""

from dataclasses import dataclass
from datetime import date
from functools import cached_property

from . import completion, rates, schedule, streaks
from .index import ActivityArena, LogIndex, vacation_dates
from .models import Activity, ActivityLog, ConfigSnapshot, VacationDay
from .structure import CURRENT, SnapshotStructure, StructureResolver


@dataclass(frozen=True)
class Snapshot:
    """Activities, logs and vacation days as of one moment."""

    activities: tuple[Activity, ...] = ()
    logs: tuple[ActivityLog, ...] = ()
    vacation_days: tuple[VacationDay, ...] = ()
    config_snapshots: tuple[ConfigSnapshot, ...] = ()

    @cached_property
    def index(self) -> LogIndex:
        return LogIndex(self.logs)

    @cached_property
    def arena(self) -> ActivityArena:
        return ActivityArena(self.activities)

    @cached_property
    def vacations(self) -> frozenset[date]:
        return vacation_dates(self.vacation_days)

    @cached_property
    def structure(self) -> StructureResolver:
        if self.config_snapshots:
            return SnapshotStructure(self.config_snapshots)
        return CURRENT

    def get(self, activity_id: str) -> Activity | None:
        return self.arena.get(activity_id)

    def find(self, name_or_id: str) -> Activity | None:
        """Look up by id, then by case-insensitive name."""
        found = self.arena.get(name_or_id)
        if found is not None:
            return found
        for activity in self.activities:
            if activity.name.lower() == name_or_id.lower():
                return activity
        return None

    def top_level(self, day: date) -> list[Activity]:
        return [a for a in self.activities if self.structure.parent_id_on(a, day) is None]

    # ============== Data Integrity ==============

    def orphaned_logs(self) -> list[ActivityLog]:
        return self.arena.orphaned_logs(self.logs)

    def container_cycles(self) -> list[str]:
        return self.arena.find_cycles()

    # ============== Queries ==============

    def activities_for_today(self, day: date, lookback_days: int | None = None) -> list[Activity]:
        return schedule.activities_for_today(
            self.activities, day, self.vacations, self.index, self.structure, lookback_days
        )

    def effective_due_date(self, activity: Activity, day: date, lookback_days: int | None = None) -> date | None:
        return schedule.effective_due_date(
            activity, day, self.index, self.vacations, self.structure, lookback_days
        )

    def applicable_children(self, container: Activity, day: date) -> list[Activity]:
        return schedule.applicable_children(
            container, day, self.arena, self.index, self.vacations, self.structure
        )

    def activity_tally(self, activity: Activity, day: date) -> completion.DayTally:
        return completion.activity_tally(activity, day, self.index, self.arena, self.structure)

    def completion_status(
        self,
        day: date,
        activities: list[Activity] | None = None,
        as_of: date | None = None,
    ) -> completion.DayCompletionStatus:
        return completion.completion_status(
            day,
            self.activities if activities is None else activities,
            self.arena,
            self.index,
            self.vacations,
            self.structure,
            as_of,
        )

    def is_fully_completed(self, activity: Activity, day: date) -> bool:
        return completion.is_fully_completed(activity, day, self.index, self.arena, self.structure)

    def is_skipped(self, activity: Activity, day: date) -> bool:
        return completion.is_skipped(activity, day, self.index, self.arena, self.structure)

    def current_streak(self, activity: Activity, as_of: date | None = None) -> int:
        return streaks.current_streak(activity, self.index, self.arena, self.vacations, as_of, self.structure)

    def longest_streak(self, activity: Activity, as_of: date | None = None) -> int:
        return streaks.longest_streak(activity, self.index, self.arena, self.vacations, as_of, self.structure)

    def completion_rate(self, activity: Activity, days: int, as_of: date | None = None) -> float:
        return rates.completion_rate(
            activity, days, self.index, self.vacations, self.arena, as_of, self.structure
        )

    def behind_schedule(
        self, window: int = 7, threshold: float = 0.5, as_of: date | None = None
    ) -> list[tuple[Activity, float]]:
        return rates.behind_schedule(
            self.activities, self.index, self.vacations, self.arena, window, threshold, as_of, self.structure
        )

    def streak_leaderboard(self, as_of: date | None = None, limit: int | None = None) -> list[tuple[Activity, int]]:
        return rates.streak_leaderboard(
            self.activities, self.index, self.vacations, self.arena, as_of, self.structure, limit
        )

    def heatmap(
        self,
        days: int = 91,
        activities: list[Activity] | None = None,
        as_of: date | None = None,
    ) -> list[rates.DayCell]:
        return rates.heatmap(
            self.activities if activities is None else activities,
            self.index,
            self.vacations,
            self.arena,
            days,
            as_of,
            self.structure,
        )

    def weekly_value_deltas(self, as_of: date | None = None, limit: int = 3) -> list[rates.ValueDelta]:
        return rates.weekly_value_deltas(self.activities, self.index, as_of, limit)

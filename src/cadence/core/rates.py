"""Windowed completion rates and analytics summaries - no I/O dependencies."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from .completion import completion_status
from .index import ActivityArena, LogIndex, vacation_dates
from .models import Activity, ActivityKind, ActivityLog, VacationDay
from .schedule import is_active_on
from .streaks import current_streak
from .structure import CURRENT, StructureResolver


def completion_rate(
    activity: Activity,
    days: int,
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    as_of: date | None = None,
    structure: StructureResolver = CURRENT,
) -> float:
    """
    Mean daily completion fraction over the trailing `days` days.

    Vacation days, days the activity was not scheduled, and fully skipped
    days are left out of the average. Returns 0.0 when no day counts.
    """
    if activity.is_reminder or days <= 0:
        return 0.0
    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    vacations = vacation_dates(vacation_days)
    today = as_of or date.today()

    fractions = []
    for offset in range(days):
        day = today - timedelta(days=offset)
        if day in vacations:
            continue
        status = completion_status(day, [activity], arena, index, vacations, structure, as_of=today)
        if status.rate is None or status.all_skipped:
            continue
        fractions.append(status.rate)

    if not fractions:
        return 0.0
    return sum(fractions) / len(fractions)


def _top_level(activities: Iterable[Activity], today: date, structure: StructureResolver) -> list[Activity]:
    return [
        a
        for a in activities
        if not a.is_reminder and structure.parent_id_on(a, today) is None and is_active_on(a, today)
    ]


def behind_schedule(
    activities: Iterable[Activity],
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    all_activities: Iterable[Activity] | ActivityArena | None = None,
    window: int = 7,
    threshold: float = 0.5,
    as_of: date | None = None,
    structure: StructureResolver = CURRENT,
) -> list[tuple[Activity, float]]:
    """
    Top-level activities started but lagging: rate in (0, threshold).

    Worst first. Activities with no progress at all are not listed.
    """
    activities = list(activities)
    index = LogIndex.of(logs)
    arena = ActivityArena.of(activities if all_activities is None else all_activities)
    vacations = vacation_dates(vacation_days)
    today = as_of or date.today()

    lagging = []
    for activity in _top_level(activities, today, structure):
        rate = completion_rate(activity, window, index, vacations, arena, today, structure)
        if 0 < rate < threshold:
            lagging.append((activity, rate))
    return sorted(lagging, key=lambda item: (item[1], item[0].name))


def streak_leaderboard(
    activities: Iterable[Activity],
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    all_activities: Iterable[Activity] | ActivityArena | None = None,
    as_of: date | None = None,
    structure: StructureResolver = CURRENT,
    limit: int | None = None,
) -> list[tuple[Activity, int]]:
    """Top-level activities with a running streak, longest first."""
    activities = list(activities)
    index = LogIndex.of(logs)
    arena = ActivityArena.of(activities if all_activities is None else all_activities)
    vacations = vacation_dates(vacation_days)
    today = as_of or date.today()

    board = []
    for activity in _top_level(activities, today, structure):
        streak = current_streak(activity, index, arena, vacations, today, structure)
        if streak > 0:
            board.append((activity, streak))
    board.sort(key=lambda item: (-item[1], item[0].name))
    return board[:limit] if limit is not None else board


@dataclass(frozen=True)
class DayCell:
    """One heatmap cell."""

    date: date
    rate: float | None
    all_skipped: bool = False
    on_vacation: bool = False

    @property
    def level(self) -> float:
        """Rate clamped for colouring; inapplicable days are 0."""
        return max(self.rate or 0.0, 0.0)


def heatmap(
    activities: Iterable[Activity],
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    all_activities: Iterable[Activity] | ActivityArena | None = None,
    days: int = 91,
    as_of: date | None = None,
    structure: StructureResolver = CURRENT,
) -> list[DayCell]:
    """
    Day cells for the trailing `days` days, oldest first.

    Pass a single activity for a per-activity heatmap.
    """
    activities = list(activities)
    index = LogIndex.of(logs)
    arena = ActivityArena.of(activities if all_activities is None else all_activities)
    vacations = vacation_dates(vacation_days)
    today = as_of or date.today()

    cells = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        status = completion_status(day, activities, arena, index, vacations, structure, as_of=today)
        cells.append(
            DayCell(
                date=day,
                rate=status.rate,
                all_skipped=status.all_skipped,
                on_vacation=day in vacations,
            )
        )
    return cells


@dataclass(frozen=True)
class ValueDelta:
    """Change in mean logged value, this week against last."""

    activity: Activity
    this_week: float
    last_week: float

    @property
    def delta(self) -> float:
        return self.this_week - self.last_week

    def format(self) -> str:
        sign = "+" if self.delta > 0 else ""
        if abs(self.delta) >= 10:
            amount = f"{int(self.delta)}"
        else:
            amount = f"{self.delta:.1f}"
        return f"{sign}{amount}{self.activity.unit}/wk"


def weekly_value_deltas(
    activities: Iterable[Activity],
    logs: Iterable[ActivityLog] | LogIndex = (),
    as_of: date | None = None,
    limit: int = 3,
) -> list[ValueDelta]:
    """
    Biggest week-over-week movements in logged values.

    Compares the mean completed value of the last 7 days with the 7 days
    before. Only value and cumulative activities with data in both weeks.
    """
    index = LogIndex.of(logs)
    today = as_of or date.today()
    this_start = today - timedelta(days=6)
    last_start = today - timedelta(days=13)

    deltas = []
    for activity in activities:
        if activity.kind not in (ActivityKind.VALUE, ActivityKind.CUMULATIVE):
            continue
        valued = [log for log in index.for_activity(activity.id) if log.is_completed and log.value is not None]
        this_week = [log.value for log in valued if this_start <= log.date <= today]
        last_week = [log.value for log in valued if last_start <= log.date < this_start]
        if not this_week or not last_week:
            continue
        delta = ValueDelta(activity, sum(this_week) / len(this_week), sum(last_week) / len(last_week))
        if abs(delta.delta) <= 0.01:
            continue
        deltas.append(delta)

    deltas.sort(key=lambda d: abs(d.delta), reverse=True)
    return deltas[:limit]

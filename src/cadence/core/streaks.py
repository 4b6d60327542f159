"""Streak computation - no I/O dependencies."""

from collections.abc import Iterable
from datetime import date, timedelta
from enum import Enum

from .completion import _fully_completed, _fully_skipped
from .index import ActivityArena, LogIndex, vacation_dates
from .models import Activity, ActivityLog, VacationDay
from .schedule import is_active_on, is_scheduled
from .structure import CURRENT, StructureResolver

# Longest history a streak walk will cover (about ten years).
MAX_STREAK_DAYS = 3650


class DayOutcome(Enum):
    """How a day affects a streak."""

    PASS_THROUGH = "pass_through"  # neither extends nor breaks
    INCREMENT = "increment"
    BREAK = "break"


def _classify(
    activity: Activity,
    day: date,
    index: LogIndex,
    arena: ActivityArena,
    vacations: frozenset[date],
    structure: StructureResolver,
) -> DayOutcome:
    if not is_active_on(activity, day) or not is_scheduled(activity, day, structure):
        return DayOutcome.PASS_THROUGH
    if day in vacations:
        return DayOutcome.PASS_THROUGH

    if activity.is_container:
        skipped = _fully_skipped(activity, day, index, arena, structure, frozenset())
    else:
        skipped = index.has_skip(activity.id, day)
    if skipped:
        return DayOutcome.PASS_THROUGH

    if _fully_completed(activity, day, index, arena, structure, frozenset()):
        return DayOutcome.INCREMENT
    return DayOutcome.BREAK


def classify_day(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    vacation_days: Iterable[VacationDay | date] = (),
    structure: StructureResolver = CURRENT,
) -> DayOutcome:
    """
    Classify one day for streak purposes.

    In priority order: not scheduled (or outside the activity's lifetime),
    vacation, and explicit skip are pass-throughs; a completed day
    increments; anything else breaks. Containers use the strict predicate:
    every applicable child completed.
    """
    return _classify(
        activity,
        day,
        LogIndex.of(logs),
        ActivityArena.of(all_activities),
        vacation_dates(vacation_days),
        structure,
    )


def _history_start(activity: Activity, index: LogIndex, arena: ActivityArena) -> date | None:
    if activity.created_at is not None:
        return activity.created_at
    ids = {activity.id}
    if activity.is_container:
        ids |= arena.descendant_ids(activity.id)
    return index.earliest_date(ids)


def current_streak(
    activity: Activity,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    vacation_days: Iterable[VacationDay | date] = (),
    as_of: date | None = None,
    structure: StructureResolver = CURRENT,
) -> int:
    """
    Consecutive satisfied occurrences ending today.

    Today counts only once satisfied; until then it is not failed yet and
    the walk starts from yesterday. Reminders have no streak.
    """
    if activity.is_reminder:
        return 0
    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    vacations = vacation_dates(vacation_days)
    today = as_of or date.today()

    start = _history_start(activity, index, arena)
    if start is None:
        return 0

    day = today
    if _classify(activity, day, index, arena, vacations, structure) is not DayOutcome.INCREMENT:
        day -= timedelta(days=1)

    streak = 0
    for _ in range(MAX_STREAK_DAYS):
        if day < start:
            break
        outcome = _classify(activity, day, index, arena, vacations, structure)
        if outcome is DayOutcome.BREAK:
            break
        if outcome is DayOutcome.INCREMENT:
            streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(
    activity: Activity,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    vacation_days: Iterable[VacationDay | date] = (),
    as_of: date | None = None,
    structure: StructureResolver = CURRENT,
) -> int:
    """Longest run of satisfied occurrences from the start of history to today."""
    if activity.is_reminder:
        return 0
    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    vacations = vacation_dates(vacation_days)
    today = as_of or date.today()

    start = _history_start(activity, index, arena)
    if start is None:
        return 0
    start = max(start, today - timedelta(days=MAX_STREAK_DAYS))

    best = 0
    run = 0
    day = start
    while day <= today:
        outcome = _classify(activity, day, index, arena, vacations, structure)
        if outcome is DayOutcome.INCREMENT:
            run += 1
            best = max(best, run)
        elif outcome is DayOutcome.BREAK and day != today:
            run = 0
        day += timedelta(days=1)
    return best

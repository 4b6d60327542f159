"""Schedule evaluation and carry-forward resolution - no I/O dependencies."""

from collections.abc import Iterable
from datetime import date, timedelta

from .index import ActivityArena, LogIndex, vacation_dates
from .models import Activity, ActivityLog, Adhoc, Daily, Monthly, Schedule, Sticky, TimeSlot, VacationDay, Weekly
from .sessions import active_slots, sessions_per_day
from .structure import CURRENT, StructureResolver


def schedule_fires(schedule: Schedule, day: date) -> bool:
    """
    Whether a recurrence rule fires on `day`.

    Sticky items never fire; their presence is decided by `is_due`.
    Empty weekday/month-day sets simply never fire.
    """
    match schedule:
        case Daily():
            return True
        case Weekly(weekdays=weekdays):
            return day.isoweekday() in weekdays
        case Monthly(month_days=month_days):
            return day.day in month_days
        case Sticky():
            return False
        case Adhoc(on=specific):
            return day == specific
    raise TypeError(f"Unknown schedule: {schedule!r}")


def is_scheduled(activity: Activity, day: date, structure: StructureResolver = CURRENT) -> bool:
    """Whether the schedule the activity followed on `day` fires that day."""
    return schedule_fires(structure.schedule_on(activity, day), day)


def is_active_on(activity: Activity, day: date) -> bool:
    """Created on or before `day` and not stopped as of `day`."""
    if activity.created_at is not None and day < activity.created_at:
        return False
    if activity.stopped_at is not None and day >= activity.stopped_at:
        return False
    return True


def is_due(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    structure: StructureResolver = CURRENT,
) -> bool:
    """
    Whether the activity appears on `day` on its own schedule.

    Sticky items stay due until completed; the day they are completed still
    counts as due.
    """
    if not is_active_on(activity, day):
        return False
    if isinstance(structure.schedule_on(activity, day), Sticky):
        index = LogIndex.of(logs)
        done_before = sum(
            1 for log in index.for_activity(activity.id) if log.is_completed and log.date < day
        )
        return done_before < sessions_per_day(activity, day, structure)
    return is_scheduled(activity, day, structure)


# ============== Carry-Forward ==============


def _is_recurring(schedule: Schedule) -> bool:
    return isinstance(schedule, (Daily, Weekly, Monthly))


def _open_slots(activity: Activity, day: date, index: LogIndex, structure: StructureResolver) -> list[TimeSlot]:
    """Slots on `day` that have neither a completion nor a skip."""
    slots = active_slots(activity, day, structure)
    if len(slots) > 1:
        logged = index.completed_slots(activity.id, day) | index.skipped_slots(activity.id, day)
        return [slot for slot in slots if slot not in logged]
    if index.is_resolved(activity.id, day):
        return []
    return list(slots) or [TimeSlot.ALL_DAY]


def carried_forward_date(
    activity: Activity,
    today: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    structure: StructureResolver = CURRENT,
    lookback_days: int | None = None,
) -> date | None:
    """
    Oldest unresolved past occurrence still due on `today`.

    Scans forward from the creation day (or `lookback_days` before today)
    for the first scheduled, non-vacation day before `today` with an open
    session. A multi-session day stays open until every slot has a
    completion or a skip; any other day closes on its first log. Only the
    oldest occurrence surfaces.
    """
    if not activity.carry_forward:
        return None
    if not _is_recurring(structure.schedule_on(activity, today)):
        return None
    if activity.stopped_at is not None and activity.stopped_at <= today:
        return None

    index = LogIndex.of(logs)
    vacations = vacation_dates(vacation_days)

    start = activity.created_at or index.earliest_date([activity.id])
    if lookback_days is not None:
        floor = today - timedelta(days=lookback_days)
        start = max(start, floor) if start else floor
    if start is None:
        return None

    day = start
    while day < today:
        schedule = structure.schedule_on(activity, day)
        if (
            _is_recurring(schedule)
            and schedule_fires(schedule, day)
            and day not in vacations
            and _open_slots(activity, day, index, structure)
        ):
            return day
        day += timedelta(days=1)
    return None


def carried_forward_slots(
    activity: Activity,
    today: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    structure: StructureResolver = CURRENT,
    lookback_days: int | None = None,
) -> tuple[date, list[TimeSlot]] | None:
    """Carried date together with the slots still lacking a log on it."""
    index = LogIndex.of(logs)
    carried = carried_forward_date(activity, today, index, vacation_days, structure, lookback_days)
    if carried is None:
        return None
    return carried, _open_slots(activity, carried, index, structure)


def effective_due_date(
    activity: Activity,
    today: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    structure: StructureResolver = CURRENT,
    lookback_days: int | None = None,
) -> date | None:
    """Date a log resolving today's occurrence should be stamped with."""
    index = LogIndex.of(logs)
    carried = carried_forward_date(activity, today, index, vacation_days, structure, lookback_days)
    if carried is not None:
        return carried
    return today if is_due(activity, today, index, structure) else None


# ============== Daily Lists ==============


def _sort_key(activity: Activity) -> tuple[int, str]:
    return (activity.sort_order, activity.name)


def activities_for_today(
    activities: Iterable[Activity],
    day: date,
    vacation_days: Iterable[VacationDay | date] = (),
    logs: Iterable[ActivityLog] | LogIndex = (),
    structure: StructureResolver = CURRENT,
    lookback_days: int | None = None,
) -> list[Activity]:
    """
    Top-level activities due on `day`, including carried-forward ones.

    Children are reached through their container, never listed directly.
    """
    index = LogIndex.of(logs)
    vacations = vacation_dates(vacation_days)
    result = []
    for activity in activities:
        if structure.parent_id_on(activity, day) is not None:
            continue
        if is_due(activity, day, index, structure) or (
            carried_forward_date(activity, day, index, vacations, structure, lookback_days) is not None
        ):
            result.append(activity)
    return sorted(result, key=_sort_key)


def applicable_children(
    container: Activity,
    day: date,
    all_activities: Iterable[Activity] | ActivityArena,
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    structure: StructureResolver = CURRENT,
    include_carried: bool = True,
) -> list[Activity]:
    """
    Children of a container that apply on `day`.

    Due children first by sort order; carried-forward children are included
    unless `include_carried` is False.
    """
    arena = ActivityArena.of(all_activities)
    index = LogIndex.of(logs)
    vacations = vacation_dates(vacation_days)
    result = []
    for child in structure.children_on(container, day, arena):
        if child.id == container.id:
            continue
        if is_due(child, day, index, structure):
            result.append(child)
        elif include_carried and carried_forward_date(child, day, index, vacations, structure) is not None:
            result.append(child)
    return sorted(result, key=_sort_key)

"""Completion status for activities and days - no I/O dependencies.

All functions are pure: the same snapshot always gives the same answer.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .index import ActivityArena, LogIndex, vacation_dates
from .models import Activity, ActivityKind, ActivityLog, TimeSlot, VacationDay
from .schedule import applicable_children, is_due
from .sessions import active_slots, sessions_per_day
from .structure import CURRENT, StructureResolver

# Recursion cap for nested containers; deeper branches are excluded.
MAX_CONTAINER_DEPTH = 16


@dataclass(frozen=True)
class DayTally:
    """
    Completion counts for one or more activities on one day.

    `skipped` counts activities that were skipped outright and so left the
    denominator.
    """

    done: float = 0.0
    total: float = 0.0
    skipped: int = 0

    def __add__(self, other: "DayTally") -> "DayTally":
        return DayTally(
            done=self.done + other.done,
            total=self.total + other.total,
            skipped=self.skipped + other.skipped,
        )


@dataclass(frozen=True)
class DayCompletionStatus:
    """
    Completion rate for a day.

    `rate` is None when nothing was scheduled (or the day is a vacation or
    in the future). A day where everything was skipped has rate 0 and
    `all_skipped` set, so it can be told apart from a missed day.
    """

    rate: float | None
    all_skipped: bool = False
    on_vacation: bool = False

    @property
    def is_applicable(self) -> bool:
        return self.rate is not None


NOT_APPLICABLE = DayCompletionStatus(rate=None)
ALL_SKIPPED = DayCompletionStatus(rate=0.0, all_skipped=True)
VACATION = DayCompletionStatus(rate=None, on_vacation=True)


# ============== Per-Activity Tally ==============


def _leaf_tally(activity: Activity, day: date, index: LogIndex, structure: StructureResolver) -> DayTally:
    logs = index.for_activity(activity.id, day)
    completed = [log for log in logs if log.is_completed]
    has_skip = any(log.is_skipped for log in logs)

    if activity.kind is ActivityKind.CUMULATIVE:
        if has_skip and not completed:
            return DayTally(skipped=1)
        if not activity.has_target:
            return DayTally()
        values = [log.value for log in completed if log.value is not None]
        value = activity.aggregate_day_value(values)
        return DayTally(done=min(value / activity.target_value, 1.0), total=1.0)

    slots = active_slots(activity, day, structure)
    sessions = sessions_per_day(activity, day, structure)

    if len(slots) > 1:
        done_slots = index.completed_slots(activity.id, day)
        skip_slots = index.skipped_slots(activity.id, day)
        slots_done = sum(1 for slot in slots if slot in done_slots)
        slots_skipped = sum(1 for slot in slots if slot not in done_slots and slot in skip_slots)
        if slots_skipped == sessions and slots_done == 0:
            return DayTally(skipped=1)
        remaining = sessions - slots_skipped
        return DayTally(done=float(min(slots_done, remaining)), total=float(remaining))

    if has_skip and not completed:
        return DayTally(skipped=1)
    return DayTally(done=float(min(len(completed), sessions)), total=float(sessions))


def _scored_children(
    container: Activity,
    day: date,
    index: LogIndex,
    arena: ActivityArena,
    structure: StructureResolver,
    visiting: frozenset[str],
) -> list[Activity]:
    children = applicable_children(container, day, arena, index, structure=structure, include_carried=False)
    return [c for c in children if not c.is_reminder and c.id not in visiting]


def _tally(
    activity: Activity,
    day: date,
    index: LogIndex,
    arena: ActivityArena,
    structure: StructureResolver,
    visiting: frozenset[str],
) -> DayTally:
    if not activity.is_container:
        return _leaf_tally(activity, day, index, structure)

    if activity.id in visiting or len(visiting) >= MAX_CONTAINER_DEPTH:
        return DayTally()
    visiting = visiting | {activity.id}

    tally = DayTally()
    for child in _scored_children(activity, day, index, arena, structure, visiting):
        tally += _tally(child, day, index, arena, structure, visiting)
    return tally


def activity_tally(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    structure: StructureResolver = CURRENT,
) -> DayTally:
    """
    (done, total, skipped) for one activity on one day.

    Containers sum their applicable children recursively. A container with
    no applicable children has zero totals and leaves the day aggregate
    untouched, though it still counts as completed for streaks.
    """
    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    return _tally(activity, day, index, arena, structure, frozenset())


# ============== Day-Level Aggregate ==============


def rate_from_tally(tally: DayTally) -> DayCompletionStatus:
    """Turn aggregated counts into a day status."""
    if tally.total <= 0 and tally.skipped > 0:
        return ALL_SKIPPED
    if tally.total <= 0:
        return NOT_APPLICABLE
    return DayCompletionStatus(rate=tally.done / tally.total)


def scheduled_for_day(
    activities: list[Activity],
    day: date,
    index: LogIndex,
    structure: StructureResolver = CURRENT,
) -> list[Activity]:
    """
    Activities a day's completion rate is computed over.

    A single activity is evaluated on its own schedule even if it has a
    parent; otherwise only top-level activities count. Reminders never count.
    """
    if len(activities) == 1:
        candidates = activities
    else:
        candidates = [a for a in activities if structure.parent_id_on(a, day) is None]
    return [a for a in candidates if not a.is_reminder and is_due(a, day, index, structure)]


def completion_status(
    day: date,
    activities: Iterable[Activity],
    all_activities: Iterable[Activity] | ActivityArena = (),
    logs: Iterable[ActivityLog] | LogIndex = (),
    vacation_days: Iterable[VacationDay | date] = (),
    structure: StructureResolver = CURRENT,
    as_of: date | None = None,
) -> DayCompletionStatus:
    """
    Completion status of a set of activities on one day.

    Pure function - no I/O.
    """
    as_of = as_of or date.today()
    if day > as_of:
        return NOT_APPLICABLE
    if day in vacation_dates(vacation_days):
        return VACATION

    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    scheduled = scheduled_for_day(list(activities), day, index, structure)
    if not scheduled:
        return NOT_APPLICABLE

    tally = DayTally()
    for activity in scheduled:
        tally += _tally(activity, day, index, arena, structure, frozenset())
    return rate_from_tally(tally)


# ============== Strict Completion ==============


def _fully_completed(
    activity: Activity,
    day: date,
    index: LogIndex,
    arena: ActivityArena,
    structure: StructureResolver,
    visiting: frozenset[str],
) -> bool:
    if activity.is_container:
        if activity.id in visiting or len(visiting) >= MAX_CONTAINER_DEPTH:
            return False
        visiting = visiting | {activity.id}
        children = _scored_children(activity, day, index, arena, structure, visiting)
        return all(_fully_completed(c, day, index, arena, structure, visiting) for c in children)

    completed = index.completed(activity.id, day)
    if activity.kind is ActivityKind.CUMULATIVE:
        if not activity.has_target:
            return bool(completed)
        values = [log.value for log in completed if log.value is not None]
        return activity.aggregate_day_value(values) >= activity.target_value

    slots = active_slots(activity, day, structure)
    if len(slots) > 1:
        done_slots = index.completed_slots(activity.id, day)
        return all(slot in done_slots for slot in slots)
    return len(completed) >= sessions_per_day(activity, day, structure)


def is_fully_completed(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    structure: StructureResolver = CURRENT,
) -> bool:
    """
    Whether every session of the activity is completed on `day`.

    Cumulative activities need their target reached (any completed log when
    there is no target). Containers need every applicable child completed,
    with no partial credit; a container with nothing applicable is satisfied.
    """
    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    return _fully_completed(activity, day, index, arena, structure, frozenset())


def is_container_completed(
    container: Activity,
    day: date,
    all_activities: Iterable[Activity] | ActivityArena = (),
    logs: Iterable[ActivityLog] | LogIndex = (),
    structure: StructureResolver = CURRENT,
) -> bool:
    """Strict container predicate used by streaks."""
    return is_fully_completed(container, day, logs, all_activities, structure)


def _fully_skipped(
    activity: Activity,
    day: date,
    index: LogIndex,
    arena: ActivityArena,
    structure: StructureResolver,
    visiting: frozenset[str],
) -> bool:
    if activity.is_container:
        if activity.id in visiting or len(visiting) >= MAX_CONTAINER_DEPTH:
            return False
        visiting = visiting | {activity.id}
        children = _scored_children(activity, day, index, arena, structure, visiting)
        pending = [c for c in children if not _fully_completed(c, day, index, arena, structure, visiting)]
        return bool(pending) and all(
            _fully_skipped(c, day, index, arena, structure, visiting) for c in pending
        )

    slots = active_slots(activity, day, structure)
    if len(slots) > 1:
        done_slots = index.completed_slots(activity.id, day)
        skip_slots = index.skipped_slots(activity.id, day)
        pending = [slot for slot in slots if slot not in done_slots]
        return bool(pending) and all(slot in skip_slots for slot in pending)
    return index.has_skip(activity.id, day) and not index.completed(activity.id, day)


def is_skipped(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    structure: StructureResolver = CURRENT,
) -> bool:
    """Whether everything left undone on `day` was explicitly skipped."""
    index = LogIndex.of(logs)
    arena = ActivityArena.of(all_activities)
    return _fully_skipped(activity, day, index, arena, structure, frozenset())


# ============== Status Queries ==============


def skip_reason(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    all_activities: Iterable[Activity] | ActivityArena = (),
    structure: StructureResolver = CURRENT,
) -> str | None:
    """First recorded skip reason; for containers, the first child's."""
    index = LogIndex.of(logs)
    if activity.is_container:
        arena = ActivityArena.of(all_activities)
        for child in applicable_children(activity, day, arena, index, structure=structure):
            for log in index.skipped(child.id, day):
                if log.skip_reason:
                    return log.skip_reason
        return None
    for log in index.skipped(activity.id, day):
        if log.skip_reason:
            return log.skip_reason
    return None


def cumulative_value(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
) -> float:
    """Aggregated completed value for the day (0 when nothing logged)."""
    index = LogIndex.of(logs)
    values = [log.value for log in index.completed(activity.id, day) if log.value is not None]
    return activity.aggregate_day_value(values)


def latest_value(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    slot: TimeSlot | None = None,
) -> float | None:
    """Value of the most recently completed log on `day`, optionally for one slot."""
    index = LogIndex.of(logs)
    candidates = [
        log
        for log in index.completed(activity.id, day)
        if log.value is not None and (slot is None or log.time_slot == slot)
    ]
    if not candidates:
        return None
    # completed_at orders "most recent"; logs without it sort first
    candidates.sort(key=lambda log: (log.completed_at is not None, log.completed_at or day))
    return candidates[-1].value


def skipped_slots(
    activity: Activity,
    day: date,
    logs: Iterable[ActivityLog] | LogIndex = (),
    structure: StructureResolver = CURRENT,
) -> list[TimeSlot]:
    """Active slots skipped and not completed on `day`."""
    index = LogIndex.of(logs)
    done = index.completed_slots(activity.id, day)
    skipped = index.skipped_slots(activity.id, day)
    return [slot for slot in active_slots(activity, day, structure) if slot in skipped and slot not in done]

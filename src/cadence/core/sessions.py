"""Session (time slot) resolution - no I/O dependencies."""

from datetime import date

from .models import Activity, TimeSlot
from .structure import CURRENT, StructureResolver


def active_slots(activity: Activity, day: date, structure: StructureResolver = CURRENT) -> tuple[TimeSlot, ...]:
    """Time slots the structure resolver reports as active on `day`."""
    return structure.time_slots_on(activity, day)


def sessions_per_day(activity: Activity, day: date, structure: StructureResolver = CURRENT) -> int:
    """Independent sessions on `day`; at least one."""
    return max(1, len(active_slots(activity, day, structure)))


def is_multi_session(activity: Activity, day: date, structure: StructureResolver = CURRENT) -> bool:
    return len(active_slots(activity, day, structure)) > 1

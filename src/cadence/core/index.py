"""Lookup indexes over log and activity snapshots - no I/O dependencies.

Every query in the core goes through these instead of scanning the raw
lists, so a heatmap of N days costs N dictionary lookups per activity.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from .models import Activity, ActivityLog, TimeSlot, VacationDay


class LogIndex:
    """Logs grouped by day, by activity, and by (activity, day)."""

    def __init__(self, logs: Iterable[ActivityLog] = ()):
        self._by_day: dict[date, list[ActivityLog]] = defaultdict(list)
        self._by_activity: dict[str, list[ActivityLog]] = defaultdict(list)
        self._by_activity_day: dict[tuple[str, date], list[ActivityLog]] = defaultdict(list)
        count = 0
        for log in logs:
            self._by_day[log.date].append(log)
            self._by_activity[log.activity_id].append(log)
            self._by_activity_day[(log.activity_id, log.date)].append(log)
            count += 1
        self._count = count

    @classmethod
    def of(cls, logs: "Iterable[ActivityLog] | LogIndex") -> "LogIndex":
        """Return `logs` if it is already an index, else index it."""
        if isinstance(logs, LogIndex):
            return logs
        return cls(logs)

    def __len__(self) -> int:
        return self._count

    def for_day(self, day: date) -> list[ActivityLog]:
        return self._by_day.get(day, [])

    def for_activity(self, activity_id: str, day: date | None = None) -> list[ActivityLog]:
        if day is None:
            return self._by_activity.get(activity_id, [])
        return self._by_activity_day.get((activity_id, day), [])

    def completed(self, activity_id: str, day: date) -> list[ActivityLog]:
        return [log for log in self.for_activity(activity_id, day) if log.is_completed]

    def skipped(self, activity_id: str, day: date) -> list[ActivityLog]:
        return [log for log in self.for_activity(activity_id, day) if log.is_skipped]

    def completed_count(self, activity_id: str, day: date | None = None) -> int:
        return sum(1 for log in self.for_activity(activity_id, day) if log.is_completed)

    def has_skip(self, activity_id: str, day: date) -> bool:
        return any(log.is_skipped for log in self.for_activity(activity_id, day))

    def completed_slots(self, activity_id: str, day: date) -> set[TimeSlot | None]:
        return {log.time_slot for log in self.for_activity(activity_id, day) if log.is_completed}

    def skipped_slots(self, activity_id: str, day: date) -> set[TimeSlot | None]:
        return {log.time_slot for log in self.for_activity(activity_id, day) if log.is_skipped}

    def is_resolved(self, activity_id: str, day: date) -> bool:
        """True if any completed or skipped log exists for the day."""
        return bool(self.for_activity(activity_id, day))

    def earliest_date(self, activity_ids: Iterable[str]) -> date | None:
        days = [log.date for aid in activity_ids for log in self.for_activity(aid)]
        return min(days) if days else None


class ActivityArena:
    """
    Activities keyed by stable id, with children referenced by id.

    Children whose parent id is unknown are kept but never reached through
    `children_of`.
    """

    def __init__(self, activities: Iterable[Activity] = ()):
        self._by_id: dict[str, Activity] = {}
        self._children: dict[str, list[Activity]] = defaultdict(list)
        for activity in activities:
            self._by_id[activity.id] = activity
        for activity in self._by_id.values():
            if activity.parent_id is not None:
                self._children[activity.parent_id].append(activity)

    @classmethod
    def of(cls, activities: "Iterable[Activity] | ActivityArena") -> "ActivityArena":
        if isinstance(activities, ActivityArena):
            return activities
        return cls(activities)

    def __contains__(self, activity_id: str) -> bool:
        return activity_id in self._by_id

    def __iter__(self):
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, activity_id: str) -> Activity | None:
        return self._by_id.get(activity_id)

    def children_of(self, parent_id: str) -> list[Activity]:
        return self._children.get(parent_id, [])

    def descendant_ids(self, parent_id: str) -> set[str]:
        """All ids below `parent_id`, stopping at cycles."""
        seen: set[str] = set()
        stack = [parent_id]
        while stack:
            for child in self.children_of(stack.pop()):
                if child.id not in seen and child.id != parent_id:
                    seen.add(child.id)
                    stack.append(child.id)
        return seen

    def find_cycles(self) -> list[str]:
        """Ids of activities that transitively contain themselves."""
        cyclic = []
        for activity in self._by_id.values():
            seen: set[str] = set()
            current = activity.parent_id
            while current is not None and current not in seen:
                if current == activity.id:
                    cyclic.append(activity.id)
                    break
                seen.add(current)
                parent = self._by_id.get(current)
                current = parent.parent_id if parent else None
        return sorted(cyclic)

    def orphaned_logs(self, logs: Iterable[ActivityLog]) -> list[ActivityLog]:
        """Logs that reference an activity not in the arena."""
        return [log for log in logs if log.activity_id not in self._by_id]


def vacation_dates(vacation_days: Iterable[VacationDay | date]) -> frozenset[date]:
    """Normalize vacation records or plain dates into a set of days."""
    if isinstance(vacation_days, frozenset):
        return vacation_days
    return frozenset(v.date if isinstance(v, VacationDay) else v for v in vacation_days)

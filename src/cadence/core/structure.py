"""Point-in-time structure resolvers - no I/O dependencies."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import Protocol

from .index import ActivityArena
from .models import Activity, ConfigSnapshot, Schedule, TimeSlot


class StructureResolver(Protocol):
    """Interface for point-in-time activity configuration."""

    def schedule_on(self, activity: Activity, day: date) -> Schedule:
        """Schedule the activity followed on a given day."""
        ...

    def time_slots_on(self, activity: Activity, day: date) -> tuple[TimeSlot, ...]:
        """Time slots active for the activity on a given day."""
        ...

    def parent_id_on(self, activity: Activity, day: date) -> str | None:
        """Container the activity belonged to on a given day."""
        ...

    def children_on(self, container: Activity, day: date, arena: ActivityArena) -> list[Activity]:
        """Children of a container on a given day."""
        ...


class CurrentStructure:
    """Resolves every day against the activity's current configuration."""

    def schedule_on(self, activity: Activity, day: date) -> Schedule:
        return activity.schedule

    def time_slots_on(self, activity: Activity, day: date) -> tuple[TimeSlot, ...]:
        return activity.time_slots

    def parent_id_on(self, activity: Activity, day: date) -> str | None:
        return activity.parent_id

    def children_on(self, container: Activity, day: date, arena: ActivityArena) -> list[Activity]:
        return arena.children_of(container.id)


CURRENT = CurrentStructure()


class SnapshotStructure:
    """
    Resolves historical days from config snapshots.

    A snapshot whose range covers the day wins; days outside every snapshot
    use the current configuration.
    """

    def __init__(self, snapshots: Iterable[ConfigSnapshot]):
        self._by_activity: dict[str, list[ConfigSnapshot]] = defaultdict(list)
        for snap in snapshots:
            self._by_activity[snap.activity_id].append(snap)
        for snaps in self._by_activity.values():
            snaps.sort(key=lambda s: s.effective_from)

    def _snapshot(self, activity_id: str, day: date) -> ConfigSnapshot | None:
        for snap in self._by_activity.get(activity_id, []):
            if snap.covers(day):
                return snap
        return None

    def schedule_on(self, activity: Activity, day: date) -> Schedule:
        snap = self._snapshot(activity.id, day)
        return snap.schedule if snap else activity.schedule

    def time_slots_on(self, activity: Activity, day: date) -> tuple[TimeSlot, ...]:
        snap = self._snapshot(activity.id, day)
        return snap.time_slots if snap else activity.time_slots

    def parent_id_on(self, activity: Activity, day: date) -> str | None:
        snap = self._snapshot(activity.id, day)
        return snap.parent_id if snap else activity.parent_id

    def children_on(self, container: Activity, day: date, arena: ActivityArena) -> list[Activity]:
        # Only current children and snapshotted activities can be children on `day`
        candidates = {child.id: child for child in arena.children_of(container.id)}
        for activity_id in self._by_activity:
            activity = arena.get(activity_id)
            if activity is not None:
                candidates.setdefault(activity_id, activity)
        return [
            activity
            for activity in candidates.values()
            if activity.id != container.id and self.parent_id_on(activity, day) == container.id
        ]

"""Tests for the snapshot facade and point-in-time structure."""

from datetime import date

import pytest

from cadence.core.completion import NOT_APPLICABLE
from cadence.core.models import Activity, ActivityKind, ActivityLog, ConfigSnapshot, Daily, TimeSlot, VacationDay, Weekly
from cadence.core.snapshot import Snapshot
from cadence.core.structure import CURRENT, SnapshotStructure

# 2024-01-02 is a Tuesday
TUESDAY = date(2024, 1, 2)
AS_OF = date(2024, 1, 20)


@pytest.fixture
def reading():
    """Reading is Mondays-only now, but was daily during the first week."""
    return Activity("read", name="Read", schedule=Weekly(frozenset({1})), created_at=date(2024, 1, 1))


@pytest.fixture
def first_week_daily():
    return ConfigSnapshot("read", date(2024, 1, 1), date(2024, 1, 7), schedule=Daily())


class TestStructure:
    def test_without_config_snapshots_uses_current(self, reading):
        snapshot = Snapshot(activities=(reading,))
        assert snapshot.structure is CURRENT
        assert snapshot.completion_status(TUESDAY, as_of=AS_OF) == NOT_APPLICABLE

    def test_history_uses_schedule_in_effect(self, reading, first_week_daily):
        snapshot = Snapshot(activities=(reading,), config_snapshots=(first_week_daily,))
        assert isinstance(snapshot.structure, SnapshotStructure)
        assert snapshot.completion_status(TUESDAY, as_of=AS_OF).rate == 0.0
        # After the snapshot range the current schedule applies again
        assert snapshot.completion_status(date(2024, 1, 9), as_of=AS_OF) == NOT_APPLICABLE

    def test_historical_parent(self):
        routine = Activity("routine", name="Routine", kind=ActivityKind.CONTAINER)
        stretch = Activity("stretch", name="Stretch")
        moved = ConfigSnapshot("stretch", date(2024, 1, 1), date(2024, 1, 7), parent_id="routine")
        snapshot = Snapshot(activities=(routine, stretch), config_snapshots=(moved,))

        assert [c.id for c in snapshot.applicable_children(routine, TUESDAY)] == ["stretch"]
        assert snapshot.applicable_children(routine, date(2024, 1, 9)) == []
        assert [a.id for a in snapshot.activities_for_today(TUESDAY)] == ["routine"]
        assert [a.id for a in snapshot.activities_for_today(date(2024, 1, 9))] == ["routine", "stretch"]

    def test_historical_slots(self):
        meds = Activity("meds", time_slots=(TimeSlot.MORNING,))
        twice = ConfigSnapshot(
            "meds", date(2024, 1, 1), date(2024, 1, 7), time_slots=(TimeSlot.MORNING, TimeSlot.EVENING)
        )
        logs = (ActivityLog("meds", TUESDAY, time_slot=TimeSlot.MORNING),)
        snapshot = Snapshot(activities=(meds,), logs=logs, config_snapshots=(twice,))
        assert snapshot.completion_status(TUESDAY, as_of=AS_OF).rate == 0.5


class TestQueries:
    @pytest.fixture
    def snapshot(self):
        meditate = Activity("meditate", name="Meditate", created_at=date(2024, 1, 1))
        logs = tuple(ActivityLog("meditate", date(2024, 1, n)) for n in range(1, 6))
        return Snapshot(
            activities=(meditate,),
            logs=logs + (ActivityLog("ghost", TUESDAY),),
            vacation_days=(VacationDay(date(2024, 1, 8)),),
        )

    def test_streaks(self, snapshot):
        meditate = snapshot.get("meditate")
        assert snapshot.current_streak(meditate, date(2024, 1, 6)) == 5
        assert snapshot.longest_streak(meditate, date(2024, 1, 10)) == 5

    def test_rate_and_heatmap(self, snapshot):
        meditate = snapshot.get("meditate")
        assert snapshot.completion_rate(meditate, 5, date(2024, 1, 5)) == 1.0
        cells = snapshot.heatmap(days=10, as_of=date(2024, 1, 10))
        assert len(cells) == 10
        assert cells[7].on_vacation

    def test_find_by_name(self, snapshot):
        assert snapshot.find("MEDITATE").id == "meditate"
        assert snapshot.find("nothing") is None

    def test_integrity(self, snapshot):
        assert [log.activity_id for log in snapshot.orphaned_logs()] == ["ghost"]
        assert snapshot.container_cycles() == []

    def test_indexes_are_cached(self, snapshot):
        assert snapshot.index is snapshot.index
        assert snapshot.arena is snapshot.arena
        assert snapshot.vacations == frozenset({date(2024, 1, 8)})

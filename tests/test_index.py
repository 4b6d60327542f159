"""Tests for log and activity indexes."""

from datetime import date

from cadence.core.index import ActivityArena, LogIndex, vacation_dates
from cadence.core.models import Activity, ActivityKind, ActivityLog, LogStatus, TimeSlot, VacationDay

DAY = date(2024, 1, 1)


class TestLogIndex:
    def test_groups_by_activity_and_day(self):
        logs = [
            ActivityLog("a", DAY),
            ActivityLog("a", date(2024, 1, 2)),
            ActivityLog("b", DAY, status=LogStatus.SKIPPED),
        ]
        index = LogIndex(logs)
        assert len(index) == 3
        assert len(index.for_day(DAY)) == 2
        assert len(index.for_activity("a")) == 2
        assert index.completed_count("a", DAY) == 1
        assert index.has_skip("b", DAY)
        assert not index.has_skip("a", DAY)

    def test_missing_keys_are_empty(self):
        index = LogIndex()
        assert index.for_day(DAY) == []
        assert index.for_activity("nope", DAY) == []
        assert not index.is_resolved("nope", DAY)
        assert index.earliest_date(["nope"]) is None

    def test_slots(self):
        index = LogIndex(
            [
                ActivityLog("a", DAY, time_slot=TimeSlot.MORNING),
                ActivityLog("a", DAY, status=LogStatus.SKIPPED, time_slot=TimeSlot.EVENING),
            ]
        )
        assert index.completed_slots("a", DAY) == {TimeSlot.MORNING}
        assert index.skipped_slots("a", DAY) == {TimeSlot.EVENING}

    def test_of_reuses_existing_index(self):
        index = LogIndex([])
        assert LogIndex.of(index) is index

    def test_earliest_date_across_activities(self):
        index = LogIndex([ActivityLog("a", date(2024, 1, 9)), ActivityLog("b", date(2024, 1, 4))])
        assert index.earliest_date(["a", "b"]) == date(2024, 1, 4)


class TestActivityArena:
    def test_children_and_descendants(self):
        arena = ActivityArena(
            [
                Activity("root", kind=ActivityKind.CONTAINER),
                Activity("mid", kind=ActivityKind.CONTAINER, parent_id="root"),
                Activity("leaf", parent_id="mid"),
            ]
        )
        assert [c.id for c in arena.children_of("root")] == ["mid"]
        assert arena.descendant_ids("root") == {"mid", "leaf"}

    def test_finds_cycles(self):
        arena = ActivityArena(
            [
                Activity("a", kind=ActivityKind.CONTAINER, parent_id="b"),
                Activity("b", kind=ActivityKind.CONTAINER, parent_id="a"),
                Activity("c", parent_id="a"),
            ]
        )
        assert arena.find_cycles() == ["a", "b"]
        assert arena.descendant_ids("a") == {"b", "c"}

    def test_orphaned_logs(self):
        arena = ActivityArena([Activity("a")])
        orphan = ActivityLog("ghost", DAY)
        assert arena.orphaned_logs([ActivityLog("a", DAY), orphan]) == [orphan]

    def test_child_of_unknown_parent_is_kept(self):
        arena = ActivityArena([Activity("child", parent_id="missing")])
        assert "child" in arena
        assert arena.children_of("missing") == [arena.get("child")]
        assert arena.get("missing") is None


class TestVacationDates:
    def test_accepts_records_and_dates(self):
        assert vacation_dates([VacationDay(DAY), date(2024, 1, 2)]) == frozenset({DAY, date(2024, 1, 2)})

    def test_frozenset_passes_through(self):
        days = frozenset({DAY})
        assert vacation_dates(days) is days

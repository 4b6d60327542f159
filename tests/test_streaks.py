"""Tests for streak computation."""

from datetime import date, timedelta

import pytest

from cadence.core.models import Activity, ActivityKind, ActivityLog, LogStatus, Sticky, TimeSlot, Weekly
from cadence.core.streaks import DayOutcome, classify_day, current_streak, longest_streak

JAN = date(2024, 1, 1)


def day(n: int) -> date:
    """January `n`, 2024."""
    return date(2024, 1, n)


def completions(activity_id: str, *days: int) -> list[ActivityLog]:
    return [ActivityLog(activity_id, day(n)) for n in days]


@pytest.fixture
def meditate():
    return Activity("meditate", name="Meditate", created_at=JAN)


class TestCurrentStreak:
    def test_five_consecutive_days(self, meditate):
        logs = completions("meditate", 1, 2, 3, 4, 5)
        assert current_streak(meditate, logs, as_of=day(5)) == 5

    def test_unfinished_today_does_not_break(self, meditate):
        logs = completions("meditate", 1, 2, 3, 4, 5)
        assert current_streak(meditate, logs, as_of=day(6)) == 5

    def test_missed_yesterday_breaks(self, meditate):
        logs = completions("meditate", 1, 2, 3, 4, 5)
        assert current_streak(meditate, logs, as_of=day(7)) == 0

    def test_skip_passes_through(self, meditate):
        logs = completions("meditate", 1, 2, 3, 4, 5) + [
            ActivityLog("meditate", day(6), status=LogStatus.SKIPPED)
        ]
        assert current_streak(meditate, logs, as_of=day(7)) == 5

    def test_vacation_passes_through(self, meditate):
        logs = completions("meditate", 1, 2, 4)
        assert current_streak(meditate, logs, vacation_days=[day(3)], as_of=day(4)) == 3

    def test_unscheduled_days_pass_through(self):
        gym = Activity("gym", schedule=Weekly(frozenset({1, 3, 5})), created_at=JAN)
        logs = completions("gym", 1, 3, 5)
        assert current_streak(gym, logs, as_of=day(7)) == 3

    def test_no_history(self, meditate):
        assert current_streak(meditate, [], as_of=day(5)) == 0
        assert current_streak(Activity("new"), [], as_of=day(5)) == 0

    def test_reminders_have_no_streak(self):
        note = Activity("note", schedule=Sticky(), created_at=JAN)
        assert current_streak(note, completions("note", 1), as_of=day(1)) == 0
        assert longest_streak(note, completions("note", 1), as_of=day(1)) == 0

    def test_stopped_activity_keeps_streak(self):
        stopped = Activity("s", created_at=JAN, stopped_at=day(4))
        logs = completions("s", 1, 2, 3)
        assert current_streak(stopped, logs, as_of=day(10)) == 3

    def test_multi_session_needs_every_slot(self):
        meds = Activity("meds", created_at=JAN, time_slots=(TimeSlot.MORNING, TimeSlot.EVENING))
        logs = [
            ActivityLog("meds", day(1), time_slot=TimeSlot.MORNING),
            ActivityLog("meds", day(1), time_slot=TimeSlot.EVENING),
            ActivityLog("meds", day(2), time_slot=TimeSlot.MORNING),
        ]
        assert current_streak(meds, logs, as_of=day(2)) == 1
        assert current_streak(meds, logs, as_of=day(3)) == 0


class TestContainerStreak:
    @pytest.fixture
    def activities(self):
        return [
            Activity("routine", kind=ActivityKind.CONTAINER, created_at=JAN),
            Activity("x", parent_id="routine", created_at=JAN),
            Activity("y", parent_id="routine", created_at=JAN),
        ]

    def test_requires_every_child(self, activities):
        logs = completions("x", 1, 2, 3) + completions("y", 1, 2)
        assert current_streak(activities[0], logs, activities, as_of=day(3)) == 2
        assert current_streak(activities[0], logs, activities, as_of=day(4)) == 0

    def test_skipped_remainder_passes_through(self, activities):
        logs = completions("x", 1, 2, 3) + completions("y", 1, 2) + [
            ActivityLog("y", day(3), status=LogStatus.SKIPPED)
        ]
        assert current_streak(activities[0], logs, activities, as_of=day(4)) == 2

    def test_history_from_children_without_creation_date(self):
        activities = [
            Activity("routine", kind=ActivityKind.CONTAINER),
            Activity("x", parent_id="routine"),
        ]
        logs = completions("x", 1, 2)
        assert current_streak(activities[0], logs, activities, as_of=day(2)) == 2


class TestLongestStreak:
    def test_longest_run(self, meditate):
        logs = completions("meditate", 1, 2, 3, 5, 6)
        assert longest_streak(meditate, logs, as_of=day(6)) == 3
        assert current_streak(meditate, logs, as_of=day(6)) == 2

    def test_longest_at_least_current(self, meditate):
        logs = completions("meditate", 1, 2, 4, 5, 6, 7)
        assert longest_streak(meditate, logs, as_of=day(8)) >= current_streak(meditate, logs, as_of=day(8))

    def test_bounded_history(self):
        old = Activity("old", created_at=date(2000, 1, 1))
        logs = [ActivityLog("old", date(2000, 1, 1) + timedelta(days=i)) for i in range(3)]
        assert longest_streak(old, logs, as_of=day(1)) == 0


class TestClassifyDay:
    def test_priority_order(self, meditate):
        logs = [
            ActivityLog("meditate", day(2)),
            ActivityLog("meditate", day(3), status=LogStatus.SKIPPED),
        ]
        assert classify_day(meditate, date(2023, 12, 31), logs) is DayOutcome.PASS_THROUGH
        assert classify_day(meditate, day(2), logs) is DayOutcome.INCREMENT
        assert classify_day(meditate, day(3), logs) is DayOutcome.PASS_THROUGH
        assert classify_day(meditate, day(4), logs) is DayOutcome.BREAK
        assert classify_day(meditate, day(4), logs, vacation_days=[day(4)]) is DayOutcome.PASS_THROUGH

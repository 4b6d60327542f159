"""Functional core - pure business logic with no I/O."""

from .models import (
    Activity,
    ActivityKind,
    ActivityLog,
    Adhoc,
    AggregationMode,
    ConfigSnapshot,
    Daily,
    LogStatus,
    Monthly,
    Schedule,
    Sticky,
    TimeSlot,
    VacationDay,
    Weekly,
)
from .index import ActivityArena, LogIndex, vacation_dates
from .structure import CURRENT, CurrentStructure, SnapshotStructure, StructureResolver
from .sessions import active_slots, is_multi_session, sessions_per_day
from .schedule import (
    activities_for_today,
    applicable_children,
    carried_forward_date,
    carried_forward_slots,
    effective_due_date,
    is_active_on,
    is_due,
    is_scheduled,
    schedule_fires,
)
from .completion import (
    DayCompletionStatus,
    DayTally,
    activity_tally,
    completion_status,
    is_container_completed,
    is_fully_completed,
    is_skipped,
)
from .streaks import DayOutcome, classify_day, current_streak, longest_streak
from .rates import DayCell, ValueDelta, behind_schedule, completion_rate, heatmap, streak_leaderboard, weekly_value_deltas
from .snapshot import Snapshot

__all__ = [
    # Models
    "Activity",
    "ActivityKind",
    "ActivityLog",
    "Adhoc",
    "AggregationMode",
    "ConfigSnapshot",
    "Daily",
    "LogStatus",
    "Monthly",
    "Schedule",
    "Sticky",
    "TimeSlot",
    "VacationDay",
    "Weekly",
    # Indexes
    "ActivityArena",
    "LogIndex",
    "vacation_dates",
    # Structure
    "CURRENT",
    "CurrentStructure",
    "SnapshotStructure",
    "StructureResolver",
    "active_slots",
    "is_multi_session",
    "sessions_per_day",
    # Schedule
    "activities_for_today",
    "applicable_children",
    "carried_forward_date",
    "carried_forward_slots",
    "effective_due_date",
    "is_active_on",
    "is_due",
    "is_scheduled",
    "schedule_fires",
    # Completion
    "DayCompletionStatus",
    "DayTally",
    "activity_tally",
    "completion_status",
    "is_container_completed",
    "is_fully_completed",
    "is_skipped",
    # Streaks
    "DayOutcome",
    "classify_day",
    "current_streak",
    "longest_streak",
    # Rates
    "DayCell",
    "ValueDelta",
    "behind_schedule",
    "completion_rate",
    "heatmap",
    "streak_leaderboard",
    "weekly_value_deltas",
    # Snapshot
    "Snapshot",
]

"""Pure activity domain model - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum


class ActivityKind(Enum):
    """What kind of value an activity tracks."""

    CHECKBOX = "checkbox"
    VALUE = "value"
    CUMULATIVE = "cumulative"
    CONTAINER = "container"
    METRIC = "metric"


class AggregationMode(Enum):
    """How multiple cumulative logs on one day combine."""

    SUM = "sum"
    AVERAGE = "average"


class LogStatus(Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"


class TimeSlot(Enum):
    """Time-of-day session slot."""

    ALL_DAY = "allDay"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def sort_index(self) -> int:
        return list(TimeSlot).index(self)

    def __lt__(self, other: "TimeSlot") -> bool:
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return self.sort_index < other.sort_index


# ============== Schedules ==============


@dataclass(frozen=True)
class Daily:
    pass


@dataclass(frozen=True)
class Weekly:
    """Fires on ISO weekdays (1=Mon..7=Sun)."""

    weekdays: frozenset[int] = frozenset()


@dataclass(frozen=True)
class Monthly:
    """Fires on days of the month (1..31)."""

    month_days: frozenset[int] = frozenset()


@dataclass(frozen=True)
class Sticky:
    """Open-ended backlog item, due until completed once."""


@dataclass(frozen=True)
class Adhoc:
    """Due on exactly one day."""

    on: date


Schedule = Daily | Weekly | Monthly | Sticky | Adhoc


def schedule_from_dict(data: dict | None) -> Schedule:
    """
    Decode a schedule from its export form.

    Unknown or missing types fall back to daily.
    """
    if not data:
        return Daily()
    match data.get("type"):
        case "weekly":
            return Weekly(frozenset(int(d) for d in data.get("weekdays") or []))
        case "monthly":
            return Monthly(frozenset(int(d) for d in data.get("monthDays") or []))
        case "sticky":
            return Sticky()
        case "adhoc":
            specific = data.get("specificDate")
            if not specific:
                return Daily()
            return Adhoc(parse_day(specific))
        case _:
            return Daily()


def parse_day(value: str | date | datetime) -> date:
    """Normalize an ISO string, date or datetime to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.split("T")[0])


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, accepting a trailing `Z` for UTC.

    Offsets are folded into naive UTC so timestamps from mixed sources
    stay comparable.
    """
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_slots(raw: list | None) -> tuple[TimeSlot, ...]:
    slots = []
    for item in raw or []:
        try:
            slots.append(TimeSlot(item))
        except ValueError:
            continue
    return tuple(sorted(set(slots)))


# ============== Activities ==============


@dataclass(frozen=True)
class Activity:
    """
    A trackable thing.

    Containers own children through the children's `parent_id`; they never
    carry logs of their own.
    """

    id: str
    name: str = ""
    kind: ActivityKind = ActivityKind.CHECKBOX
    schedule: Schedule = field(default_factory=Daily)
    time_slots: tuple[TimeSlot, ...] = ()
    target_value: float | None = None
    aggregation_mode: AggregationMode = AggregationMode.SUM
    carry_forward: bool = False
    parent_id: str | None = None
    created_at: date | None = None
    stopped_at: date | None = None
    sort_order: int = 0
    unit: str = ""

    @property
    def is_container(self) -> bool:
        return self.kind is ActivityKind.CONTAINER

    @property
    def is_reminder(self) -> bool:
        """Sticky and one-off items are reminders, excluded from rates and streaks."""
        return isinstance(self.schedule, (Sticky, Adhoc))

    @property
    def is_recurring(self) -> bool:
        return isinstance(self.schedule, (Daily, Weekly, Monthly))

    @property
    def has_target(self) -> bool:
        return self.target_value is not None and self.target_value > 0

    def aggregate_day_value(self, values: list[float]) -> float:
        """Combine one day's logged values according to the aggregation mode."""
        if not values:
            return 0.0
        if self.aggregation_mode is AggregationMode.AVERAGE:
            return sum(values) / len(values)
        return sum(values)

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        """Create Activity from an export record."""
        try:
            kind = ActivityKind(data.get("type", "checkbox"))
        except ValueError:
            kind = ActivityKind.CHECKBOX
        try:
            mode = AggregationMode(data.get("aggregationMode", "sum"))
        except ValueError:
            mode = AggregationMode.SUM
        slots = data.get("timeSlots")
        if not slots and data.get("timeWindow"):
            slots = [data["timeWindow"].get("slot")]
        target = data.get("targetValue")
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            kind=kind,
            schedule=schedule_from_dict(data.get("schedule")),
            time_slots=_parse_slots(slots),
            target_value=float(target) if target is not None else None,
            aggregation_mode=mode,
            carry_forward=bool(data.get("carryForward", False)),
            parent_id=str(data["parentID"]) if data.get("parentID") else None,
            created_at=parse_day(data["createdAt"]) if data.get("createdAt") else None,
            stopped_at=parse_day(data["stoppedAt"]) if data.get("stoppedAt") else None,
            sort_order=int(data.get("sortOrder", 0)),
            unit=data.get("unit") or "",
        )


@dataclass(frozen=True)
class ActivityLog:
    """
    One resolution of an occurrence.

    `date` is the logical day the occurrence belongs to (the original due
    date for carried items); `completed_at` is when the user acted.
    """

    activity_id: str
    date: date
    status: LogStatus = LogStatus.COMPLETED
    value: float | None = None
    time_slot: TimeSlot | None = None
    skip_reason: str | None = None
    completed_at: datetime | None = None
    id: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status is LogStatus.COMPLETED

    @property
    def is_skipped(self) -> bool:
        return self.status is LogStatus.SKIPPED

    @classmethod
    def from_dict(cls, data: dict) -> "ActivityLog":
        try:
            status = LogStatus(data.get("status", "completed"))
        except ValueError:
            status = LogStatus.COMPLETED
        slot = None
        if data.get("timeSlot"):
            try:
                slot = TimeSlot(data["timeSlot"])
            except ValueError:
                slot = None
        completed_at = None
        if data.get("completedAt"):
            completed_at = parse_timestamp(data["completedAt"])
        value = data.get("value")
        return cls(
            activity_id=str(data["activityID"]),
            date=parse_day(data["date"]),
            status=status,
            value=float(value) if value is not None else None,
            time_slot=slot,
            skip_reason=data.get("skipReason"),
            completed_at=completed_at,
            id=str(data.get("id", "")),
        )


@dataclass(frozen=True)
class VacationDay:
    """A day on which every activity is a pass-through."""

    date: date

    @classmethod
    def from_dict(cls, data: dict | str) -> "VacationDay":
        if isinstance(data, str):
            return cls(parse_day(data))
        return cls(parse_day(data["date"]))


@dataclass(frozen=True)
class ConfigSnapshot:
    """
    Structural configuration of an activity over a closed date range.

    Captured when an edit applies only going forward, so that historical
    days keep the schedule, slots and parent they had at the time.
    """

    activity_id: str
    effective_from: date
    effective_until: date
    schedule: Schedule = field(default_factory=Daily)
    time_slots: tuple[TimeSlot, ...] = ()
    parent_id: str | None = None

    def covers(self, day: date) -> bool:
        return self.effective_from <= day <= self.effective_until

    @classmethod
    def from_dict(cls, data: dict) -> "ConfigSnapshot":
        slots = data.get("timeSlots")
        if not slots and data.get("timeWindow"):
            slots = [data["timeWindow"].get("slot")]
        return cls(
            activity_id=str(data["activityID"]),
            effective_from=parse_day(data["effectiveFrom"]),
            effective_until=parse_day(data["effectiveUntil"]),
            schedule=schedule_from_dict(data.get("schedule")),
            time_slots=_parse_slots(slots),
            parent_id=str(data["parentID"]) if data.get("parentID") else None,
        )

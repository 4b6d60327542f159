"""Shared workflow layer between the CLI and the functional core.

Loads a snapshot through the configured adapter, reports data-integrity
problems, and shapes core results into rows ready for display or JSON.
"""

import logging
from datetime import date
from pathlib import Path

from .adapters.json_snapshot import JsonSnapshotStore
from .config import Config
from .core.models import Activity
from .core.rates import DayCell
from .core.snapshot import Snapshot

logger = logging.getLogger(__name__)


def get_store(config: Config, data_file: Path | str | None = None) -> JsonSnapshotStore:
    """Resolve the data file from an explicit path or the config."""
    if data_file:
        return JsonSnapshotStore(data_file)
    return JsonSnapshotStore(config.data_path)


def check_integrity(snapshot: Snapshot) -> list[str]:
    """Log and return data problems the core tolerates but users should fix."""
    problems = []

    orphaned = snapshot.orphaned_logs()
    if orphaned:
        missing = sorted({log.activity_id for log in orphaned})
        message = f"{len(orphaned)} log(s) reference unknown activities: {', '.join(missing)}"
        logger.warning(message)
        problems.append(message)

    cycles = snapshot.container_cycles()
    if cycles:
        message = f"Container cycle through: {', '.join(cycles)}"
        logger.warning(message)
        problems.append(message)

    for activity in snapshot.activities:
        if activity.parent_id is not None and snapshot.get(activity.parent_id) is None:
            message = f"Activity {activity.id} has unknown parent {activity.parent_id}"
            logger.warning(message)
            problems.append(message)

    return problems


def load_snapshot(config: Config, data_file: Path | str | None = None) -> Snapshot:
    """Load tracker data and report integrity problems."""
    store = get_store(config, data_file)
    snapshot = store.load()
    logger.debug(
        f"Loaded {len(snapshot.activities)} activities, {len(snapshot.logs)} logs "
        f"from {store.path}"
    )
    check_integrity(snapshot)
    return snapshot


# ============== Report Rows ==============


def _item_row(snapshot: Snapshot, activity: Activity, day: date, config: Config) -> dict:
    due = snapshot.effective_due_date(activity, day, config.carry_forward_lookback_days)
    row = {
        "id": activity.id,
        "name": activity.name,
        "kind": activity.kind.value,
        "due_date": due.isoformat() if due else day.isoformat(),
        "carried": due is not None and due < day,
        "completed": snapshot.is_fully_completed(activity, due or day),
        "skipped": snapshot.is_skipped(activity, due or day),
    }
    if activity.is_container:
        row["children"] = [
            _item_row(snapshot, child, day, config) for child in snapshot.applicable_children(activity, day)
        ]
    return row


def today_rows(snapshot: Snapshot, day: date, config: Config) -> list[dict]:
    """Activities due on `day`, with carried items and container children."""
    return [
        _item_row(snapshot, activity, day, config)
        for activity in snapshot.activities_for_today(day, config.carry_forward_lookback_days)
    ]


def status_summary(snapshot: Snapshot, day: date, as_of: date | None = None) -> dict:
    """Day-level completion plus a per-activity breakdown."""
    status = snapshot.completion_status(day, as_of=as_of)
    breakdown = []
    for activity in snapshot.top_level(day):
        if activity.is_reminder:
            continue
        own = snapshot.completion_status(day, [activity], as_of=as_of)
        if own.rate is None:
            continue
        breakdown.append(
            {"id": activity.id, "name": activity.name, "rate": own.rate, "all_skipped": own.all_skipped}
        )
    return {
        "date": day.isoformat(),
        "rate": status.rate,
        "all_skipped": status.all_skipped,
        "on_vacation": status.on_vacation,
        "activities": breakdown,
    }


def streak_rows(snapshot: Snapshot, as_of: date | None = None) -> list[dict]:
    """Current and longest streaks for top-level recurring activities."""
    today = as_of or date.today()
    rows = []
    for activity in snapshot.top_level(today):
        if activity.is_reminder:
            continue
        rows.append(
            {
                "id": activity.id,
                "name": activity.name,
                "current": snapshot.current_streak(activity, today),
                "longest": snapshot.longest_streak(activity, today),
            }
        )
    rows.sort(key=lambda r: (-r["current"], -r["longest"], r["name"]))
    return rows


def behind_rows(snapshot: Snapshot, config: Config, as_of: date | None = None) -> list[dict]:
    """Activities lagging their schedule over the configured window."""
    return [
        {"id": activity.id, "name": activity.name, "rate": rate}
        for activity, rate in snapshot.behind_schedule(
            config.rate_window_days, config.behind_threshold, as_of
        )
    ]


# ============== Heatmap Rendering ==============

HEAT_LEVELS = "·░▒▓█"


def heat_char(cell: DayCell) -> str:
    """One character for a heatmap cell."""
    if cell.on_vacation:
        return "v"
    if cell.all_skipped:
        return "s"
    if cell.rate is None:
        return " "
    if cell.rate <= 0:
        return HEAT_LEVELS[0]
    step = min(int(cell.rate * (len(HEAT_LEVELS) - 1) + 0.999), len(HEAT_LEVELS) - 1)
    return HEAT_LEVELS[step]


def render_heatmap(cells: list[DayCell]) -> str:
    """Render cells as a weekday-by-week grid, Monday on top."""
    if not cells:
        return ""
    rows: list[list[str]] = [[] for _ in range(7)]
    # Pad the first column so every column starts on Monday
    for weekday in range(cells[0].date.weekday()):
        rows[weekday].append(" ")
    for cell in cells:
        rows[cell.date.weekday()].append(heat_char(cell))
    labels = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    return "\n".join(f"{label} {''.join(row)}".rstrip() for label, row in zip(labels, rows))

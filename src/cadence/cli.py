"""Cadence CLI - Habit Tracker."""

import json
import logging
import sys
from datetime import date

import click

from .adapters.json_snapshot import SnapshotError
from .config import load_config
from .workflows import (
    behind_rows,
    check_integrity,
    load_snapshot,
    render_heatmap,
    status_summary,
    streak_rows,
    today_rows,
)

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def _day(value) -> date:
    return value.date() if value else date.today()


def _load(ctx: click.Context):
    try:
        return load_snapshot(ctx.obj["config"], ctx.obj["data"])
    except SnapshotError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _percent(rate: float | None) -> str:
    return "  n/a" if rate is None else f"{rate * 100:4.0f}%"


@click.group()
@click.version_option()
@click.option("--data", "data_file", type=click.Path(dir_okay=False), help="Tracker JSON file")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, data_file: str | None, debug: bool):
    """Cadence - Habit Tracker CLI."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING),
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["data"] = data_file


def _echo_item(row: dict, indent: int = 0) -> None:
    if row["completed"]:
        mark = "x"
    elif row["skipped"]:
        mark = "-"
    else:
        mark = " "
    carried = f" (from {row['due_date']})" if row["carried"] else ""
    click.echo(f"{'  ' * indent}[{mark}] {row['name']}{carried}")
    for child in row.get("children", []):
        _echo_item(child, indent + 1)


@main.command()
@click.option("--date", "target_date", type=DATE_TYPE, help="Day to show (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def today(ctx, target_date, as_json: bool):
    """List activities due today, including carried-forward ones."""
    snapshot = _load(ctx)
    day = _day(target_date)
    rows = today_rows(snapshot, day, ctx.obj["config"])

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("Nothing due.")
        return
    for row in rows:
        _echo_item(row)


@main.command()
@click.option("--date", "target_date", type=DATE_TYPE, help="Day to show (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def status(ctx, target_date, as_json: bool):
    """Show the completion rate for a day."""
    snapshot = _load(ctx)
    day = _day(target_date)
    summary = status_summary(snapshot, day)

    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    if summary["on_vacation"]:
        click.echo(f"{day.isoformat()}: vacation")
        return
    if summary["all_skipped"]:
        click.echo(f"{day.isoformat()}: all skipped")
        return
    click.echo(f"{day.isoformat()}: {_percent(summary['rate']).strip()}")
    for item in summary["activities"]:
        suffix = " (skipped)" if item["all_skipped"] else ""
        click.echo(f"  {_percent(item['rate'])}  {item['name']}{suffix}")


@main.command()
@click.option("--date", "target_date", type=DATE_TYPE, help="Evaluate as of this day (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def streaks(ctx, target_date, as_json: bool):
    """Show current and longest streaks."""
    snapshot = _load(ctx)
    rows = streak_rows(snapshot, _day(target_date))

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No recurring activities.")
        return
    for row in rows:
        click.echo(f"{row['current']:4}  (best {row['longest']:4})  {row['name']}")


@main.command()
@click.option("--days", type=click.IntRange(min=1), default=None, help="Number of days to cover")
@click.option("--activity", "activity_ref", help="Limit to one activity (id or name)")
@click.pass_context
def heatmap(ctx, days: int | None, activity_ref: str | None):
    """Render a completion heatmap."""
    snapshot = _load(ctx)
    config = ctx.obj["config"]

    activities = None
    if activity_ref:
        activity = snapshot.find(activity_ref)
        if activity is None:
            click.echo(f"Error: No activity named {activity_ref!r}", err=True)
            sys.exit(1)
        activities = [activity]

    cells = snapshot.heatmap(days or config.heatmap_days, activities)
    click.echo(render_heatmap(cells))


@main.command()
@click.option("--date", "target_date", type=DATE_TYPE, help="Evaluate as of this day (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def behind(ctx, target_date, as_json: bool):
    """List activities falling behind their schedule."""
    snapshot = _load(ctx)
    rows = behind_rows(snapshot, ctx.obj["config"], _day(target_date))

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("Nothing behind schedule.")
        return
    for row in rows:
        click.echo(f"{_percent(row['rate'])}  {row['name']}")


@main.command()
@click.pass_context
def check(ctx):
    """Check tracker data for integrity problems."""
    snapshot = _load(ctx)
    problems = check_integrity(snapshot)
    if not problems:
        click.echo("OK")
        return
    for problem in problems:
        click.echo(f"• {problem}")
    sys.exit(1)


if __name__ == "__main__":
    main()

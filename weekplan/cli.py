"""Developer CLI for weekplan.

Offline checks over persisted plan blobs: validation, double-bookings,
calendar layout, and normalisation of legacy blobs to the canonical shape.
"""

from datetime import date as date_type
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from weekplan.calendar.conflicts import compute_conflicts_by_session
from weekplan.calendar.layout import AutoScope, TimeWindow, WindowMode, layout_week
from weekplan.config.settings import settings
from weekplan.core.logger import setup_logger
from weekplan.errors import FormatError
from weekplan.plans.derived import compute_training_counts, week_label
from weekplan.plans.reviver import dumps_plan, revive_plan
from weekplan.plans.week_templates import week_dates
from weekplan.sessions.time_range import min_to_hhmm, parse_time_range
from weekplan.sessions.types import Plan
from weekplan.sessions.validators import validate_plan
from weekplan.utils.calendar import parse_iso_date, week_days

console = Console()

app = typer.Typer(
    name="weekplan",
    help="weekplan CLI - offline checks for weekly training plans",
    add_completion=False,
)


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override WEEKPLAN_LOG_LEVEL"),
) -> None:
    setup_logger(settings, level=log_level)


def _load_plan(path: Path) -> Plan:
    """Read and revive a plan blob, exiting with code 2 when unusable."""
    try:
        blob = path.read_bytes()
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot read {path}: {e}")
        raise typer.Exit(2) from e

    plan = revive_plan(blob)
    if plan is None:
        console.print(
            f"[red]Error:[/red] {path} is not a plan blob (expected UTF-8 JSON: an object with a sessions array)"
        )
        raise typer.Exit(2)
    return plan


@app.command()
def validate(plan_path: Path = typer.Argument(..., help="Plan JSON file")) -> None:
    """Report missing or invalid fields per session.

    Exits with code 1 when any session is invalid.
    """
    plan = _load_plan(plan_path)
    errors = validate_plan(plan)

    if not errors:
        console.print(
            Panel(
                Text(f"{len(plan.sessions)} sessions valid", style="bold green"),
                subtitle=f"{plan.week_id} · {week_label(plan)}",
                border_style="green",
            )
        )
        return

    table = Table(title=f"Invalid sessions in {plan.week_id}")
    table.add_column("Session")
    table.add_column("Errors", style="red")
    for session_id, kinds in errors.items():
        table.add_row(session_id, ", ".join(str(kind) for kind in kinds))
    console.print(table)
    raise typer.Exit(1)


@app.command()
def conflicts(plan_path: Path = typer.Argument(..., help="Plan JSON file")) -> None:
    """List participants booked into overlapping sessions on the same day."""
    plan = _load_plan(plan_path)
    by_session = compute_conflicts_by_session(plan)

    rows = [conflict for session_conflicts in by_session.values() for conflict in session_conflicts]
    if not rows:
        console.print("[green]No double-bookings[/green]")
        return

    table = Table(title=f"Double-bookings in {plan.week_id}")
    table.add_column("Session")
    table.add_column("Time")
    table.add_column("Overlaps")
    table.add_column("Participant", style="yellow")
    for conflict in rows:
        session = plan.get(conflict.session_id)
        table.add_row(
            conflict.session_id,
            f"{session.day} {session.time_label}" if session else "",
            conflict.other_session_id,
            conflict.participant_id,
        )
    console.print(table)


@app.command()
def layout(
    plan_path: Path = typer.Argument(..., help="Plan JSON file"),
    day: str | None = typer.Option(None, "--date", help="Any day of the week to show (YYYY-MM-DD)"),
    scope: AutoScope = typer.Option(AutoScope.WEEK, "--scope", help="Fit the auto window over the week or one day"),
    window: str | None = typer.Option(None, "--window", help="Manual window, e.g. 08:00-20:00"),
) -> None:
    """Print the column layout of each day of the plan's week."""
    plan = _load_plan(plan_path)

    if day is not None:
        anchor = parse_iso_date(day)
        if anchor is None:
            console.print(f"[red]Error:[/red] invalid --date {day!r}")
            raise typer.Exit(2)
        days = week_days(anchor)
    else:
        days = week_dates(plan)

    manual = None
    mode = WindowMode.AUTO
    if window:
        try:
            start, end = parse_time_range(window)
        except FormatError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(2) from e
        manual = TimeWindow(start=start, end=end)
        mode = WindowMode.MANUAL

    layouts = layout_week(plan, days, mode=mode, scope=scope, manual=manual)
    shown = layouts[0].window
    console.print(f"[bold]{plan.week_id}[/bold] · {week_label(plan)} · window {min_to_hhmm(shown.start)}–{min_to_hhmm(shown.end)}")

    for day_layout in layouts:
        if not day_layout.items:
            continue
        table = Table(title=_day_title(day_layout.day))
        table.add_column("Item")
        table.add_column("From")
        table.add_column("To")
        table.add_column("Column", justify="right")
        for item in day_layout.items:
            table.add_row(
                item.item_id,
                min_to_hhmm(item.start),
                min_to_hhmm(item.end),
                f"{item.column + 1}/{item.column_count}",
            )
        console.print(table)


def _day_title(day: date_type | None) -> str:
    return day.isoformat() if day else "?"


@app.command()
def normalize(
    plan_path: Path = typer.Argument(..., help="Plan JSON file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
) -> None:
    """Revive a (legacy) plan blob and write it back in the canonical shape."""
    plan = _load_plan(plan_path)
    payload = dumps_plan(plan)

    if output is None:
        typer.echo(payload)
        return

    output.write_text(payload + "\n", encoding="utf-8")
    counts = compute_training_counts(plan)
    logger.info(f"Wrote {len(plan.sessions)} sessions to {output}")
    console.print(f"[green]Wrote {output}[/green] ({len(plan.sessions)} sessions, {len(counts)} participants)")


if __name__ == "__main__":
    app()

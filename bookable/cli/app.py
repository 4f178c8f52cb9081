"""
Main CLI application using Typer.
"""

import json
from pathlib import Path
from typing import Annotated, NoReturn, Optional, Tuple

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.file_store import FileScheduleStore
from ..adapters.records import ScheduleRecord
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import AvailabilityError
from ..domain.timezone import DAY_NAMES, now, to_date
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="bookable",
    help="Compute bookable session slots from availability schedules",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _load_store(config_file: Optional[Path]) -> Tuple[AppConfig, FileScheduleStore]:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    config.configure_logging()
    return config, FileScheduleStore.from_file(config.data_file)


def _fail(message: object) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(message))}")
    raise typer.Exit(1)


def _format_weekly_slots(schedule: ScheduleRecord) -> str:
    parts = []
    for slot in sorted(schedule.weekly_slots(), key=lambda s: (s.day_of_week, s.start_time)):
        parts.append(
            f"{DAY_NAMES[slot.day_of_week][:3]} {slot.start_time:%H:%M}-{slot.end_time:%H:%M}"
        )
    return ", ".join(parts) or "-"


@app.command()
def find(
    professional: Annotated[str, typer.Argument(help="Id of the dietitian or therapist")],
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD)")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Session duration in minutes")] = None,
    event_type: Annotated[Optional[str], typer.Option("--event-type", "-e", help="Event type whose linked schedule applies")] = None,
    include_past: Annotated[bool, typer.Option("--include-past", help="Keep slots that already started.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
):
    """
    Find bookable slots for a professional.

    Examples:

        bookable find dietitian-1

        bookable find dietitian-1 --start 2024-11-25 --end 2024-11-29 --duration 60

        bookable find dietitian-1 --event-type initial-consultation --json
    """
    try:
        config, store = _load_store(config_file)
        tz = config.timezone

        start_date = to_date(start) if start else now(tz).date()
        end_date = to_date(end) if end else start_date + pendulum.duration(days=config.defaults.lookahead_days - 1)

        if duration is None and event_type is None:
            duration = config.defaults.duration_minutes

        service = AvailabilityService(store=store, default_timezone=tz)
        result = service.find_slots(
            professional_id=professional,
            start_date=start_date,
            end_date=end_date,
            duration_minutes=duration,
            event_type_id=event_type,
            now=None if include_past else now(tz),
        )
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(f"\n[bold cyan]Availability for {professional}[/bold cyan]")
    console.print(f"   Period: {start_date.isoformat()} - {end_date.isoformat()}")
    console.print(f"   Duration: {result.duration_minutes} minutes")
    console.print(f"   Timezone: {result.timezone}")
    console.print(f"   Schedule: {result.schedule_id or '-'}")
    console.print()

    if not result.slots:
        console.print(f"[yellow]No bookable slots found.[/yellow] {result.message or ''}")
    else:
        console.print(f"[bold green]{len(result.slots)} bookable slot(s):[/bold green]\n")
        for slot in result.slots:
            console.print(f"  {slot.format_display()}")

    console.print()


@app.command()
def schedules(
    professional: Annotated[str, typer.Argument(help="Id of the dietitian or therapist")],
    config_file: ConfigOption = None,
):
    """
    Show a professional's availability schedules.
    """
    try:
        _, store = _load_store(config_file)
        records = store.list_schedules(professional)

        if not records:
            console.print("[yellow]No schedules configured.[/yellow]")
            return

        table = Table(
            title=f"Schedules of {professional}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Id", style="bold yellow")
        table.add_column("Name")
        table.add_column("Timezone")
        table.add_column("Active")
        table.add_column("Default")
        table.add_column("Weekly slots", style="dim")

        for schedule in records:
            table.add_row(
                schedule.id,
                schedule.name,
                schedule.timezone or "-",
                "yes" if schedule.active else "no",
                "yes" if schedule.is_default else "no",
                _format_weekly_slots(schedule),
            )
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print()
    console.print(table)
    console.print()


@app.command()
def list_professionals(config_file: ConfigOption = None):
    """
    List all professionals in the schedule data file.
    """
    try:
        _, store = _load_store(config_file)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    professionals = store.list_professionals()
    if not professionals:
        console.print("[yellow]No professionals in the schedule data file.[/yellow]")
        return

    table = Table(title="Professionals", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Role", style="dim")

    for professional in professionals:
        table.add_row(professional.id, professional.name, professional.role)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookable[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

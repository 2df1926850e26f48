"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Iterable, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..adapters.memory_repository import InMemorySnapshotRepository
from ..config import AppConfig, get_default_config_path, parse_instant
from ..domain.exceptions import ConfigError, ScheduleError
from ..domain.models import Doctor, Patient, Room, ScheduleEntry, Specialization
from ..logging_config import configure_logging
from ..services.schedule_service import ScheduleService

app = typer.Typer(
    name="clinic-schedule",
    help="Book visits into a clinic's on-call schedule",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./clinic.yaml")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _load(config_file: Optional[Path], verbose: bool):
    """
    Load the configuration and wire a service around the seeded schedule.

    Returns:
        Tuple of (config, service)
    """
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    configure_logging("DEBUG" if verbose else config.log_level)

    repository = InMemorySnapshotRepository([config.build_snapshot()])
    return config, ScheduleService(repository)


def _parse_time(value: str, tz: str) -> pendulum.DateTime:
    try:
        return parse_instant(value, tz)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _render_schedule(entries: Iterable[ScheduleEntry], title: str) -> Table:
    """Build a table of entries sorted by room and start."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Room", style="bold yellow")
    table.add_column("Doctor")
    table.add_column("Date")
    table.add_column("From - To")
    table.add_column("Patient", style="dim")

    for entry in sorted(entries, key=lambda e: (e.room.name, e.start)):
        table.add_row(
            entry.room.name,
            entry.doctor.specialization.value,
            entry.start.format("DD.MM.YYYY"),
            f"{entry.start.format('HH:mm')} - {entry.end.format('HH:mm')}",
            entry.patient.name if entry.patient else "[green]on call[/green]",
        )
    return table


@app.command()
def show(
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the configured schedule.
    """
    try:
        config, service = _load(config_file, verbose)
        snapshot = service.snapshot(config.clinic_id)

        if not snapshot.entries:
            console.print("[yellow]No schedule entries configured.[/yellow]")
            return

        console.print()
        console.print(_render_schedule(snapshot.entries, f"Clinic {config.clinic_id}"))
        console.print()

    except (FileNotFoundError, ValueError, ScheduleError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    room: Annotated[str, typer.Argument(help="Room name, e.g. 'Room 1'")],
    start: Annotated[str, typer.Argument(help="Visit start (YYYY-MM-DD HH:mm)")],
    end: Annotated[str, typer.Argument(help="Visit end (YYYY-MM-DD HH:mm)")],
    patient: Annotated[str, typer.Argument(help="Patient name")],
    doctor: Annotated[Specialization, typer.Option("--doctor", "-d", help="Doctor specialization")] = Specialization.SURGEON,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Book a visit into the on-call time of a doctor.

    Examples:

        clinic-schedule book "Room 1" "2024-11-25 11:00" "2024-11-25 12:30" "Jan Kowalski"
    """
    try:
        config, service = _load(config_file, verbose)
        visit = ScheduleEntry(
            doctor=Doctor(doctor),
            start=_parse_time(start, config.timezone),
            end=_parse_time(end, config.timezone),
            room=Room(room),
            patient=Patient(patient),
        )

        result = service.book_visit(config.clinic_id, visit)

        console.print()
        if not result.applied:
            console.print(
                f"[yellow]⚠ Visit not booked: {result.rejection.describe()}.[/yellow]\n"
                "Pick a time inside one gap-free on-call block of the doctor."
            )
            return

        console.print(f"[bold green]✓ Booked {visit}[/bold green]\n")
        console.print(_render_schedule(result.entries, "Changed entries"))
        console.print()

    except (FileNotFoundError, ValueError, ScheduleError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def clear(
    room: Annotated[str, typer.Argument(help="Room name, e.g. 'Room 1'")],
    start: Annotated[str, typer.Argument(help="Blocked interval start (YYYY-MM-DD HH:mm)")],
    end: Annotated[str, typer.Argument(help="Blocked interval end (YYYY-MM-DD HH:mm)")],
    doctor: Annotated[Specialization, typer.Option("--doctor", "-d", help="Doctor specialization")] = Specialization.SURGEON,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Remove a blocked interval from a doctor's on-call time in a room.
    """
    try:
        config, service = _load(config_file, verbose)
        blocker = ScheduleEntry(
            doctor=Doctor(doctor),
            start=_parse_time(start, config.timezone),
            end=_parse_time(end, config.timezone),
            room=Room(room),
        )

        snapshot = service.clear_block(config.clinic_id, blocker)

        console.print()
        console.print(_render_schedule(snapshot.in_room(blocker.room), f"{room} after clearing {blocker.time_range}"))
        console.print()

    except (FileNotFoundError, ValueError, ScheduleError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinic-schedule[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import AppConfig, configure_logging, get_default_config_path
from ..domain.availability import AvailabilityCalculator, DayStatus
from ..domain.conflicts import has_conflict
from ..domain.exceptions import BookingError
from ..domain.models import TimeInterval
from ..domain.timeutils import calendar_day, to_minutes

app = typer.Typer(
    name="lashbook",
    help="Inspect lash studio schedules: free slots and booking conflicts",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
BookedOption = Annotated[
    Optional[List[str]],
    typer.Option("--booked", "-b", help="Already booked interval as HH:MM-HH:MM (repeatable)")
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config = AppConfig.load_from_yaml(config_file or get_default_config_path())
    configure_logging(config.log_level)
    return config


def _parse_interval(text: str) -> TimeInterval:
    """Parse ``HH:MM-HH:MM`` into an interval."""
    start, separator, end = text.partition("-")
    if not separator:
        raise typer.BadParameter(f"Expected HH:MM-HH:MM, got '{text}'")
    try:
        return TimeInterval.parse(start.strip(), end.strip())
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.command()
def providers(config_file: ConfigOption = None):
    """
    List all configured providers.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.providers:
        console.print("[yellow]No providers defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured providers",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="bold yellow")
    table.add_column("Studio")
    table.add_column("Working days", style="dim")
    table.add_column("Active services", justify="right")

    for provider in config.providers:
        days = ", ".join(
            f"{WEEKDAY_NAMES[entry.day][:3]} {entry.start}-{entry.end}"
            for entry in sorted(provider.working_hours, key=lambda e: e.day)
            if entry.is_working
        )
        active = sum(1 for service in provider.services if service.is_active)
        table.add_row(provider.id, provider.studio_name, days or "-", str(active))

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    provider: Annotated[str, typer.Argument(help="Provider id from the config file")],
    date: Annotated[str, typer.Option("--date", "-d", help="Day to inspect (YYYY-MM-DD)")],
    booked: BookedOption = None,
    slot_minutes: Annotated[Optional[int], typer.Option("--slot-minutes", help="Slot length in minutes")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the free slots of a provider on a day.

    Examples:

        lashbook slots studio-ana --date 2026-10-20

        lashbook slots studio-ana --date 2026-10-20 --booked 10:00-10:30
    """
    try:
        config = _load_config(config_file)

        provider_config = config.find_provider(provider)
        if provider_config is None:
            console.print(f"[bold red]Error:[/bold red] Unknown provider '{provider}'")
            raise typer.Exit(1)

        day = calendar_day(date, config.timezone)
        booked_intervals = [_parse_interval(item) for item in booked or []]
        calculator = AvailabilityCalculator(slot_minutes or config.booking.slot_minutes)

        result = calculator.for_day(provider_config.to_profile(), day, booked_intervals)

    except (FileNotFoundError, ValueError, BookingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    weekday = WEEKDAY_NAMES[day.isoweekday() % 7]
    console.print(f"\n[bold cyan]{provider_config.studio_name or provider_config.id}[/bold cyan]"
                  f" - {weekday}, {day.to_date_string()}")

    if result.status == DayStatus.NOT_WORKING:
        console.print("[yellow]Not working on this day.[/yellow]\n")
        return

    console.print(f"Working hours: {result.window}")

    if result.status == DayStatus.FULLY_BOOKED:
        console.print("[yellow]Fully booked - no free slots left.[/yellow]\n")
        return

    console.print(f"[bold green]{len(result.slots)} free slot(s):[/bold green]")
    console.print("  " + "  ".join(result.slot_strings()))
    console.print()


@app.command()
def check(
    start: Annotated[str, typer.Option("--start", "-s", help="Requested start time (HH:MM)")],
    duration: Annotated[int, typer.Option("--duration", help="Service duration in minutes")],
    booked: BookedOption = None,
):
    """
    Check whether a requested appointment collides with booked intervals.
    """
    try:
        candidate = TimeInterval.starting_at(to_minutes(start), duration)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    existing = [_parse_interval(item) for item in booked or []]

    if has_conflict(candidate, existing):
        console.print(f"[bold red]Conflict:[/bold red] {candidate} overlaps an existing booking.")
        raise typer.Exit(1)

    console.print(f"[bold green]Available:[/bold green] {candidate} is free.")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]lashbook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

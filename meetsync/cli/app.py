"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..adapters.json_store import JsonFileMeetingStore
from ..config import AppConfig, load_config
from ..domain.exceptions import MeetingNotFoundError, MeetSyncError, ValidationError
from ..domain.models import Meeting, format_slot_local
from ..services.meeting_service import MeetingService

app = typer.Typer(
    name="meetsync",
    help="Propose meeting times and find the slot that works for everyone",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    MeetSync - share a code, collect availability, pick the best slot.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _build_service(config_file: Optional[Path]) -> Tuple[AppConfig, MeetingService]:
    """Load configuration and wire a service on top of the JSON store."""
    config = load_config(config_file)
    store = JsonFileMeetingStore(config.store_path)
    return config, MeetingService.from_config(config, store)


def _fail(error: Exception) -> typer.Exit:
    """Print a domain error and return the exit to raise."""
    if isinstance(error, MeetingNotFoundError):
        console.print(f"[bold red]Meeting not found:[/bold red] {escape(error.code)}")
    elif isinstance(error, ValidationError):
        console.print(f"[bold red]Invalid input[/bold red] ({escape(error.field)}): {escape(error.message)}")
    else:
        console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    return typer.Exit(1)


def _print_meeting(meeting: Meeting, timezone: str) -> None:
    """Show meeting details and its numbered slots."""
    console.print(Panel.fit(
        f"[bold]{escape(meeting.name)}[/bold]\n"
        f"Created by {escape(meeting.creator_name)} on {meeting.created_at.in_timezone(timezone).format('DD.MM.YYYY HH:mm')}\n"
        f"Participants: {meeting.participant_count}",
        title=f"Meeting [bold yellow]{meeting.code}[/bold yellow]"
    ))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column(f"Slot ({timezone})", style="bold")
    table.add_column("Votes", justify="right")

    for idx, slot in enumerate(meeting.time_slots, 1):
        table.add_row(str(idx), format_slot_local(slot, timezone), str(len(meeting.votes[slot])))

    console.print(table)


def _resolve_slots(meeting: Meeting, selections: List[str]) -> List[str]:
    """
    Turn CLI slot selections into slot identifiers.

    Numbers refer to the numbered list printed by ``show``; anything else is
    passed through as an ISO-8601 instant.
    """
    resolved: List[str] = []
    for item in selections:
        item = item.strip()
        if item.isdigit():
            idx = int(item) - 1
            if 0 <= idx < len(meeting.time_slots):
                resolved.append(meeting.time_slots[idx])
            else:
                console.print(f"[yellow]Warning: slot number {item} is out of range, skipping[/yellow]")
        else:
            resolved.append(item)
    return resolved


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Meeting name")],
    creator: Annotated[str, typer.Option("--by", "-b", help="Your name")],
    dates: Annotated[Optional[List[str]], typer.Option("--date", "-d", help="Candidate date (YYYY-MM-DD), repeatable")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Daily window start (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Daily window end (HH:MM)")] = None,
    config_file: ConfigOption = None,
):
    """
    Create a meeting and print its share code.

    Examples:

        meetsync create "Team sync" --by alice -d 2025-09-25 -d 2025-09-26

        meetsync create "Retro" --by bob -d 2025-09-25 --start 13:00 --end 15:00
    """
    try:
        config, service = _build_service(config_file)
        result = service.create_meeting(
            name=name,
            creator_name=creator,
            dates=dates or [],
            start_time=start or config.defaults.start_time,
            end_time=end or config.defaults.end_time,
        )
    except (FileNotFoundError, ValueError, MeetSyncError) as e:
        raise _fail(e)

    console.print(f"\n[bold green]✓ Meeting created.[/bold green] Share this code: [bold yellow]{result.code}[/bold yellow]\n")
    _print_meeting(result.meeting, config.timezone)
    console.print()


@app.command()
def show(
    code: Annotated[str, typer.Argument(help="Meeting code")],
    config_file: ConfigOption = None,
):
    """
    Show a meeting and its numbered slots.
    """
    try:
        config, service = _build_service(config_file)
        meeting = service.get_meeting(code)
    except (FileNotFoundError, ValueError, MeetSyncError) as e:
        raise _fail(e)

    console.print()
    _print_meeting(meeting, config.timezone)
    console.print()


@app.command()
def vote(
    code: Annotated[str, typer.Argument(help="Meeting code")],
    participant: Annotated[str, typer.Argument(help="Your name")],
    slots: Annotated[Optional[List[str]], typer.Argument(help="Slot numbers from 'show' or ISO-8601 instants")] = None,
    config_file: ConfigOption = None,
):
    """
    Submit (or replace) your availability for a meeting.

    Examples:

        meetsync vote AB12CD carol 1 2 5

        meetsync vote AB12CD carol 2025-09-25T16:00:00.000Z
    """
    try:
        config, service = _build_service(config_file)
        meeting = service.get_meeting(code)
        result = service.submit_vote(
            code=code,
            participant_name=participant,
            available_slots=_resolve_slots(meeting, slots or []),
        )
    except (FileNotFoundError, ValueError, MeetSyncError) as e:
        raise _fail(e)

    console.print(f"\n[bold green]✓ Vote recorded for {escape(participant)}.[/bold green]")
    if result.best_slots:
        console.print("[bold cyan]Best so far:[/bold cyan]")
        for best in result.best_slots:
            console.print(
                f"  {format_slot_local(best.slot, config.timezone)}"
                f"  ({best.votes} vote(s), {best.percentage}%)"
            )
    console.print()


@app.command()
def results(
    code: Annotated[str, typer.Argument(help="Meeting code")],
    config_file: ConfigOption = None,
):
    """
    Show the best slots and the full vote tally.
    """
    try:
        config, service = _build_service(config_file)
        outcome = service.get_results(code)
    except (FileNotFoundError, ValueError, MeetSyncError) as e:
        raise _fail(e)

    tz = config.timezone
    meeting = outcome.meeting
    console.print(f"\n[bold cyan]{escape(meeting.name)}[/bold cyan] ({meeting.code}), {meeting.participant_count} participant(s)\n")

    if not outcome.best_slots:
        console.print("[yellow]⚠ No votes yet.[/yellow]\n")
    else:
        console.print(f"[bold green]✓ {len(outcome.best_slots)} best slot(s):[/bold green]")
        for best in outcome.best_slots:
            console.print(f"  {format_slot_local(best.slot, tz)}  ({best.votes} vote(s), {best.percentage}%)")
        console.print()

    table = Table(title="Votes per slot", show_header=True, header_style="bold cyan")
    table.add_column(f"Slot ({tz})", style="bold")
    table.add_column("Votes", justify="right")
    table.add_column("Voters", style="dim")

    for tally in outcome.votes_summary:
        table.add_row(format_slot_local(tally.slot, tz), str(tally.votes), escape(", ".join(tally.voters)))

    console.print(table)
    console.print()


@app.command(name="list")
def list_meetings(
    config_file: ConfigOption = None,
):
    """
    List all stored meetings.
    """
    try:
        config, service = _build_service(config_file)
        meetings = service.list_meetings()
    except (FileNotFoundError, ValueError, MeetSyncError) as e:
        raise _fail(e)

    if not meetings:
        console.print("[yellow]No meetings stored yet.[/yellow]")
        return

    table = Table(title="Meetings", show_header=True, header_style="bold cyan")
    table.add_column("Code", style="bold yellow")
    table.add_column("Name")
    table.add_column("Creator", style="dim")
    table.add_column("Slots", justify="right")
    table.add_column("Participants", justify="right")

    for meeting in meetings:
        table.add_row(
            meeting.code,
            escape(meeting.name),
            escape(meeting.creator_name),
            str(len(meeting.time_slots)),
            str(meeting.participant_count),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]meetsync[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

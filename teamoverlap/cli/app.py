"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.models import HOURS_IN_DAY, MeetingFinderResult, MeetingQuality, MeetingSlot
from ..domain.slot_search import MeetingSlotFinder
from ..domain.team_status import MemberState, format_time_until_available
from ..domain.timezones import (
    COMMON_TIMEZONES,
    day_offset,
    format_timezone_label,
    system_clock,
    working_hours_in_zone,
)
from ..services.meeting_finder import MeetingFinderService

app = typer.Typer(
    name="teamoverlap",
    help="Find meeting times that fit a distributed team's working hours",
    add_completion=False
)

console = Console()

QUALITY_STYLES = {
    MeetingQuality.EXCELLENT: "bold green",
    MeetingQuality.GOOD: "green",
    MeetingQuality.FAIR: "yellow",
    MeetingQuality.POOR: "red",
}

STATE_LABELS = {
    MemberState.WORKING: "[green]● Working[/green]",
    MemberState.ENDING_SOON: "[yellow]● Ending soon[/yellow]",
    MemberState.STARTING_SOON: "[cyan]○ Starting soon[/cyan]",
    MemberState.OFF: "[dim]○ Off[/dim]",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
GroupOption = Annotated[Optional[str], typer.Option("--group", "-g", help="Limit to one group (id or name)")]
TimezoneOption = Annotated[
    Optional[str],
    typer.Option("--tz", help="Viewer timezone. Defaults to viewer_timezone from the config")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """
    Find meeting times that fit a distributed team's working hours.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig) -> MeetingFinderService:
    return MeetingFinderService(
        team_directory=config,
        slot_finder=MeetingSlotFinder(clock=system_clock),
        defaults=config.search,
    )


def _format_members(slot: MeetingSlot) -> tuple[str, str, str]:
    available = ", ".join(member.name for member in slot.available_members) or "-"
    flexing = ", ".join(
        f"{flex.member.name} ({flex.direction.value} {flex.hours}h)"
        for flex in slot.flexing_members
    ) or "-"
    unavailable = ", ".join(member.name for member in slot.unavailable_members) or "-"
    return available, flexing, unavailable


def _render_slots(slots: List[MeetingSlot], viewer_timezone: str, title: str) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column(f"Time ({viewer_timezone})", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Quality")
    table.add_column("Available", style="green")
    table.add_column("Flexing", style="yellow")
    table.add_column("Unavailable", style="red")

    for rank, slot in enumerate(slots, 1):
        style = QUALITY_STYLES[slot.quality]
        table.add_row(
            str(rank),
            slot.format_time_range(),
            f"{slot.duration}h",
            f"{slot.score:.0f}",
            f"[{style}]{slot.quality.value}[/{style}]",
            *_format_members(slot),
        )

    console.print(table)


def _render_result(result: MeetingFinderResult, viewer_timezone: str) -> None:
    console.print()
    if result.has_results:
        console.print(
            f"[bold green]✓ {len(result.slots)} meeting slot(s) found:[/bold green]\n"
        )
        _render_slots(list(result.slots), viewer_timezone, "Best meeting times")
        if result.suggestion:
            console.print(f"\n[dim]{result.suggestion}[/dim]")
    else:
        console.print(f"[yellow]⚠ {result.suggestion}[/yellow]")
        if result.slots:
            console.print()
            _render_slots(list(result.slots), viewer_timezone, "Closest partial matches")
    console.print()


@app.command()
def find(
    participants: Annotated[
        Optional[List[str]],
        typer.Argument(help="Member ids or names. Without any, the whole team is searched.")
    ] = None,
    config_file: ConfigOption = None,
    group: GroupOption = None,
    tz: TimezoneOption = None,
    min_duration: Annotated[Optional[int], typer.Option("--min-duration", help="Minimum meeting length in hours")] = None,
    max_duration: Annotated[Optional[int], typer.Option("--max-duration", help="Maximum meeting length in hours")] = None,
    flex: Annotated[Optional[bool], typer.Option("--flex/--no-flex", help="Allow members to shift their hours")] = None,
    flex_range: Annotated[Optional[int], typer.Option("--flex-range", help="Maximum hours a member may shift")] = None,
):
    """
    Find the best meeting times for the team.

    Examples:

        # Whole team, defaults from config.yaml
        teamoverlap find

        # Selected members, 2-3 hour windows
        teamoverlap find alice bob --min-duration 2 --max-duration 3

        # One group, allowing members to flex up to 2 hours
        teamoverlap find --group engineering --flex --flex-range 2
    """
    try:
        config = _load_config(config_file)
        viewer_timezone = tz or config.viewer_timezone
        service = _build_service(config)

        console.print("\n[bold cyan]🕑 teamoverlap - meeting finder[/bold cyan]\n")

        result = service.find_slots(
            viewer_timezone=viewer_timezone,
            identifiers=participants or [],
            group=group,
            min_duration=min_duration,
            max_duration=max_duration,
            allow_flex_hours=flex,
            flex_range=flex_range,
        )

        _render_result(result, viewer_timezone)

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def status(
    config_file: ConfigOption = None,
    group: GroupOption = None,
    tz: TimezoneOption = None,
):
    """
    Show who is working right now and who starts or finishes soon.
    """
    try:
        config = _load_config(config_file)
        viewer_timezone = tz or config.viewer_timezone
        service = _build_service(config)
        now = system_clock()

        team = service.current_status(group=group)

        if not team.members:
            console.print("[yellow]No team members configured.[/yellow]")
            return

        table = Table(title="Team Status", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="bold yellow")
        table.add_column("Timezone", style="dim")
        table.add_column("Local time")
        table.add_column("Status")
        table.add_column("Next change")

        for member_status in team.members:
            member = member_status.member
            local = now.in_timezone(member.timezone)
            offset = day_offset(member.timezone, viewer_timezone, now)
            local_time = local.format("HH:mm")
            if offset:
                local_time = f"{local_time} ({offset:+d}d)"

            if member_status.is_working:
                if member_status.hours_until_end is None:
                    next_change = "always available"
                else:
                    next_change = f"ends in {member_status.hours_until_end}h"
            else:
                next_change = format_time_until_available(member_status.minutes_until_available)

            table.add_row(
                member.name,
                format_timezone_label(member.timezone, now),
                local_time,
                STATE_LABELS[member_status.state],
                next_change,
            )

        console.print()
        console.print(table)
        console.print(
            f"\n[green]{len(team.working)} working[/green] · "
            f"[cyan]{len(team.starting_soon)} starting soon[/cyan] · "
            f"[yellow]{len(team.ending_soon)} ending soon[/yellow]\n"
        )

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def timeline(
    config_file: ConfigOption = None,
    group: GroupOption = None,
    tz: TimezoneOption = None,
):
    """
    Show each member's working hours on the viewer's 24-hour day.
    """
    try:
        config = _load_config(config_file)
        viewer_timezone = tz or config.viewer_timezone
        service = _build_service(config)
        now = system_clock()

        members = service.select_participants(group=group)
        if not members:
            console.print("[yellow]No team members configured.[/yellow]")
            return

        table = Table(
            title=f"Working hours in {format_timezone_label(viewer_timezone, now)}",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Name", style="bold yellow")
        table.add_column("".join(f"{hour:<3d}" for hour in range(0, HOURS_IN_DAY, 3)))

        for member in members:
            working = set(working_hours_in_zone(member, viewer_timezone, now))
            cells = "".join(
                "[green]█[/green]" if hour in working else "[dim]·[/dim]"
                for hour in range(HOURS_IN_DAY)
            )
            table.add_row(member.name, cells)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_members(config_file: ConfigOption = None):
    """
    List all configured team members.
    """
    try:
        config = _load_config(config_file)

        if not config.members:
            console.print("[yellow]No team members configured.[/yellow]")
            return

        group_names = {group.id: group.name for group in config.groups}

        table = Table(
            title="Team Members",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Id", style="dim")
        table.add_column("Name", style="bold yellow")
        table.add_column("Title")
        table.add_column("Timezone")
        table.add_column("Hours")
        table.add_column("Group", style="dim")

        for member in config.members:
            table.add_row(
                member.id,
                member.name,
                member.title,
                member.timezone,
                f"{member.working_hours_start:02d}:00 - {member.working_hours_end:02d}:00",
                group_names.get(member.group, "-") if member.group else "-",
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def timezones():
    """
    List the supported member timezones with their current offsets.
    """
    now = system_clock()
    table = Table(title="Supported timezones", show_header=True, header_style="bold cyan")
    table.add_column("Identifier", style="bold")
    table.add_column("Label")

    for timezone in COMMON_TIMEZONES:
        table.add_row(timezone, format_timezone_label(timezone, now, include_time=True))

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(Panel.fit(f"[bold cyan]teamoverlap[/bold cyan] version [bold]{__version__}[/bold]"))


if __name__ == "__main__":
    app()

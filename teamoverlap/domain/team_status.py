"""
Current team status: who is working now, who starts or finishes soon.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from pendulum import DateTime

from .models import HOURS_IN_DAY, TeamMember
from .timezones import resolve_timezone
from .working_hours import is_within_window

SOON_THRESHOLD_HOURS = 2
MINUTES_IN_DAY = HOURS_IN_DAY * 60


class MemberState(str, Enum):
    WORKING = "working"
    ENDING_SOON = "ending_soon"
    STARTING_SOON = "starting_soon"
    OFF = "off"


@dataclass(frozen=True)
class MemberStatus:
    """Snapshot of one member's availability at a given instant."""
    member: TeamMember
    state: MemberState
    local_hour: int
    hours_until_start: Optional[int] = None
    hours_until_end: Optional[int] = None
    minutes_until_available: int = 0

    @property
    def is_working(self) -> bool:
        return self.state in (MemberState.WORKING, MemberState.ENDING_SOON)


@dataclass(frozen=True)
class TeamStatus:
    """Team members grouped by their current availability."""
    members: List[MemberStatus]
    working: List[MemberStatus]
    starting_soon: List[MemberStatus]
    ending_soon: List[MemberStatus]


def member_status(
    member: TeamMember,
    at: DateTime,
    soon_threshold: int = SOON_THRESHOLD_HOURS
) -> MemberStatus:
    """
    Classify a member at the instant ``at``.

    Args:
        member: Team member to classify
        at: Instant to evaluate
        soon_threshold: Hours ahead that count as "soon"

    Returns:
        MemberStatus
    """
    local = at.in_timezone(resolve_timezone(member.timezone))
    start = member.working_hours_start
    end = member.working_hours_end

    if is_within_window(local.hour, start, end):
        hours_until_end = None if start == end else (end - local.hour) % HOURS_IN_DAY
        ending_soon = hours_until_end is not None and hours_until_end <= soon_threshold
        return MemberStatus(
            member=member,
            state=MemberState.ENDING_SOON if ending_soon else MemberState.WORKING,
            local_hour=local.hour,
            hours_until_end=hours_until_end,
        )

    hours_until_start = (start - local.hour) % HOURS_IN_DAY
    minutes_now = local.hour * 60 + local.minute
    minutes_until_available = (start * 60 - minutes_now) % MINUTES_IN_DAY

    return MemberStatus(
        member=member,
        state=(
            MemberState.STARTING_SOON
            if hours_until_start <= soon_threshold
            else MemberState.OFF
        ),
        local_hour=local.hour,
        hours_until_start=hours_until_start,
        minutes_until_available=minutes_until_available,
    )


def team_status(
    members: Sequence[TeamMember],
    at: DateTime,
    soon_threshold: int = SOON_THRESHOLD_HOURS
) -> TeamStatus:
    """Classify every member and group them, soonest change first."""
    statuses = [member_status(member, at, soon_threshold) for member in members]

    return TeamStatus(
        members=statuses,
        working=[status for status in statuses if status.is_working],
        starting_soon=sorted(
            (s for s in statuses if s.state is MemberState.STARTING_SOON),
            key=lambda s: s.minutes_until_available,
        ),
        ending_soon=sorted(
            (s for s in statuses if s.state is MemberState.ENDING_SOON),
            key=lambda s: s.hours_until_end,
        ),
    )


def format_time_until_available(minutes: int) -> str:
    """Format a minute count as ``"in 2h 15m"``; zero means available now."""
    if minutes == 0:
        return "Available now"

    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"in {mins}m"
    if mins == 0:
        return f"in {hours}h"
    return f"in {hours}h {mins}m"

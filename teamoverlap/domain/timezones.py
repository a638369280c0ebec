"""
Hour translation between timezones.

Everything here works on whole wall-clock hours. Offsets are read at an
explicit instant so callers (and tests) can pin them instead of depending on
the real calendar date.
"""

import math
from typing import Callable, List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidTimezoneError
from .models import HOURS_IN_DAY, TeamMember

Clock = Callable[[], DateTime]

# Closed catalog offered when adding members
COMMON_TIMEZONES = (
    "Pacific/Honolulu",     # UTC-10
    "America/Anchorage",    # UTC-9
    "America/Los_Angeles",  # UTC-8
    "America/Denver",       # UTC-7
    "America/Chicago",      # UTC-6
    "America/New_York",     # UTC-5
    "America/Sao_Paulo",    # UTC-3
    "Atlantic/Azores",      # UTC-1
    "Europe/London",        # UTC+0
    "Europe/Paris",         # UTC+1
    "Europe/Berlin",        # UTC+1
    "Europe/Athens",        # UTC+2
    "Europe/Moscow",        # UTC+3
    "Asia/Dubai",           # UTC+4
    "Asia/Kolkata",         # UTC+5:30
    "Asia/Dhaka",           # UTC+6
    "Asia/Bangkok",         # UTC+7
    "Asia/Shanghai",        # UTC+8
    "Asia/Tokyo",           # UTC+9
    "Australia/Sydney",     # UTC+10/11
    "Pacific/Auckland",     # UTC+12/13
)


def system_clock() -> DateTime:
    """Return the current instant in UTC."""
    return pendulum.now("UTC")


def resolve_timezone(name: str):
    """
    Resolve an IANA identifier to a pendulum timezone.

    Raises:
        InvalidTimezoneError: If the identifier is unknown or malformed
    """
    if not isinstance(name, str) or not name:
        raise InvalidTimezoneError(str(name))
    try:
        return pendulum.timezone(name)
    except (ValueError, KeyError) as exc:
        raise InvalidTimezoneError(name) from exc


def utc_offset_hours(timezone: str, at: DateTime) -> float:
    """Return the UTC offset of ``timezone`` at ``at`` in (possibly fractional) hours."""
    return at.in_timezone(resolve_timezone(timezone)).offset / 3600


def hour_shift(from_tz: str, to_tz: str, at: DateTime) -> int:
    """
    Whole-hour difference between two zones at ``at``.

    Fractional differences (e.g. +5:30) are rounded half up, so a half-hour
    zone lands on the later hour.
    """
    diff = utc_offset_hours(to_tz, at) - utc_offset_hours(from_tz, at)
    return math.floor(diff + 0.5)


def translate_hour(
    hour: int,
    from_tz: str,
    to_tz: str,
    at: Optional[DateTime] = None
) -> int:
    """
    Convert an hour of day in ``from_tz`` to the hour of day in ``to_tz``.

    Args:
        hour: Hour of day (0-23) in the source timezone
        from_tz: Source IANA timezone
        to_tz: Target IANA timezone
        at: Instant whose offsets are used; defaults to now

    Returns:
        Hour of day (0-23) in the target timezone
    """
    if at is None:
        at = system_clock()
    return (hour + hour_shift(from_tz, to_tz, at)) % HOURS_IN_DAY


def local_hour(timezone: str, at: DateTime) -> int:
    """Return the wall-clock hour in ``timezone`` at ``at``."""
    return at.in_timezone(resolve_timezone(timezone)).hour


def day_offset(member_tz: str, viewer_tz: str, at: DateTime) -> int:
    """Calendar-day difference of the member's date relative to the viewer's."""
    member_date = at.in_timezone(resolve_timezone(member_tz)).date()
    viewer_date = at.in_timezone(resolve_timezone(viewer_tz)).date()
    return (member_date - viewer_date).days


def format_timezone_label(
    timezone: str,
    at: DateTime,
    include_time: bool = False
) -> str:
    """
    Format a timezone for display, e.g. ``"New York (UTC-5)"``.

    Half-hour zones keep their minutes: ``"Kolkata (UTC+5:30)"``.
    """
    offset = utc_offset_hours(timezone, at)
    sign = "+" if offset >= 0 else "-"
    hours = int(abs(offset))
    minutes = round((abs(offset) % 1) * 60)
    offset_str = f"{sign}{hours}:{minutes:02d}" if minutes else f"{sign}{hours}"

    city = timezone.split("/")[-1].replace("_", " ")
    label = f"{city} (UTC{offset_str})"

    if include_time:
        local = at.in_timezone(resolve_timezone(timezone))
        label = f"{label} - {local.format('h:mm A')}"

    return label


def working_hours_in_zone(
    member: TeamMember,
    viewer_tz: str,
    at: DateTime
) -> List[int]:
    """
    List the viewer-timezone hours during which ``member`` is working.

    Wrapping windows are returned in working order, e.g. ``[22, 23, 0, 1]``.
    """
    start = translate_hour(member.working_hours_start, member.timezone, viewer_tz, at)
    return [(start + i) % HOURS_IN_DAY for i in range(member.working_hours_length())]

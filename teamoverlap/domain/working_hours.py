"""
Working-window and flex evaluation on local wall-clock hours.
"""

from typing import Iterable, Optional

from .models import HOURS_IN_DAY, FlexDirection, FlexShift


def is_within_window(hour: int, start: int, end: int) -> bool:
    """
    Check if ``hour`` falls inside the working window ``[start, end)``.

    Windows with ``end < start`` wrap past midnight; ``start == end`` is an
    always-available member.
    """
    if start < end:
        return start <= hour < end
    if start == end:
        return True
    return hour >= start or hour < end


def shift_needed(hour: int, start: int, end: int, direction: FlexDirection) -> int:
    """
    Hours the window must stretch in ``direction`` to cover ``hour``.

    Shifting early by ``s`` opens the window at ``start - s``; shifting late
    by ``s`` closes it at ``end + s``.
    """
    if is_within_window(hour, start, end):
        return 0
    if direction is FlexDirection.EARLY:
        return (start - hour) % HOURS_IN_DAY
    return (hour - end) % HOURS_IN_DAY + 1


def try_flex_hours(
    hours: Iterable[int],
    start: int,
    end: int,
    max_shift: int
) -> Optional[FlexShift]:
    """
    Find one shift that brings every hour in ``hours`` into the window.

    The worst-case boundary hour decides the size of the shift in each
    direction. The smaller shift wins; on a tie, late wins.

    Returns:
        FlexShift, or None if all hours are already covered or no single
        shift up to ``max_shift`` covers them
    """
    missed = [hour for hour in hours if not is_within_window(hour, start, end)]
    if not missed or max_shift < 1:
        return None

    late = max(shift_needed(hour, start, end, FlexDirection.LATE) for hour in missed)
    early = max(shift_needed(hour, start, end, FlexDirection.EARLY) for hour in missed)

    if late <= max_shift and late <= early:
        return FlexShift(direction=FlexDirection.LATE, hours=late)
    if early <= max_shift:
        return FlexShift(direction=FlexDirection.EARLY, hours=early)
    return None


def try_flex(hour: int, start: int, end: int, max_shift: int) -> Optional[FlexShift]:
    """
    Find the smallest shift that brings ``hour`` into the working window.

    Returns:
        FlexShift, or None if the hour is already covered or no shift up to
        ``max_shift`` works
    """
    return try_flex_hours([hour], start, end, max_shift)

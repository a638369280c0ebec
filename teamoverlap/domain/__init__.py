"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import InvalidRangeError, InvalidTimezoneError, TeamOverlapError
from .models import (
    FailureReason,
    FlexDirection,
    FlexMember,
    MeetingFinderOptions,
    MeetingFinderResult,
    MeetingQuality,
    MeetingSlot,
    TeamMember,
    unique_members,
)
from .slot_search import MeetingSlotFinder, find_meeting_slots

__all__ = [
    "FailureReason",
    "FlexDirection",
    "FlexMember",
    "InvalidRangeError",
    "InvalidTimezoneError",
    "MeetingFinderOptions",
    "MeetingFinderResult",
    "MeetingQuality",
    "MeetingSlot",
    "MeetingSlotFinder",
    "TeamMember",
    "TeamOverlapError",
    "find_meeting_slots",
    "unique_members",
]

"""
Domain models for team members and meeting slot results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Set, Tuple

HOURS_IN_DAY = 24


class FlexDirection(str, Enum):
    """Direction in which a member would stretch their working window."""
    EARLY = "early"
    LATE = "late"


class MeetingQuality(str, Enum):
    """Coarse bucketing of a slot score for presentation."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class FailureReason(str, Enum):
    """Why a search produced no usable slot."""
    NO_PARTICIPANTS = "no_participants"
    ENABLE_FLEX = "enable_flex"
    TOO_SPREAD = "too_spread"
    REDUCE_DURATION = "reduce_duration"


@dataclass(frozen=True)
class TeamMember:
    """
    A team member with a home timezone and a local working window.

    Working hours are whole wall-clock hours in the member's own timezone.
    ``working_hours_end < working_hours_start`` means the window wraps past
    midnight; equal bounds mean the member is always available.
    """
    id: str
    name: str
    timezone: str
    working_hours_start: int
    working_hours_end: int
    title: str = ""
    group_id: Optional[str] = None

    def __post_init__(self):
        for value in (self.working_hours_start, self.working_hours_end):
            if not 0 <= value <= 23:
                raise ValueError(f"Working hours must be between 0 and 23, got {value}")

    def working_hours_length(self) -> int:
        """Return the length of the working window in hours."""
        length = (self.working_hours_end - self.working_hours_start) % HOURS_IN_DAY
        return length or HOURS_IN_DAY


def unique_members(members: Sequence[TeamMember]) -> List[TeamMember]:
    """Drop repeated members (same id), keeping the first occurrence in order."""
    unique: List[TeamMember] = []
    seen: Set[str] = set()
    for member in members:
        if member.id not in seen:
            seen.add(member.id)
            unique.append(member)
    return unique


@dataclass(frozen=True)
class FlexShift:
    """Result of a successful flex evaluation."""
    direction: FlexDirection
    hours: int


@dataclass(frozen=True)
class FlexMember:
    """A member who can attend a slot only by shifting their hours."""
    member: TeamMember
    direction: FlexDirection
    hours: int


@dataclass(frozen=True)
class MeetingSlot:
    """
    A ranked candidate meeting window, expressed in the viewer's timezone.

    Invariant: the three member partitions are disjoint and together hold
    exactly the searched participants.
    """
    start_hour: int
    end_hour: int
    duration: int
    score: float
    quality: MeetingQuality
    available_members: Tuple[TeamMember, ...] = ()
    flexing_members: Tuple[FlexMember, ...] = ()
    unavailable_members: Tuple[TeamMember, ...] = ()

    @property
    def slot_id(self) -> str:
        return f"{self.start_hour}-{self.end_hour}-{self.duration}"

    @property
    def hours(self) -> List[int]:
        """Viewer hours covered by the slot, in order."""
        return [(self.start_hour + i) % HOURS_IN_DAY for i in range(self.duration)]

    @property
    def total_flex_hours(self) -> int:
        return sum(flex.hours for flex in self.flexing_members)

    @property
    def attendee_count(self) -> int:
        return len(self.available_members) + len(self.flexing_members)

    def contains(self, other: "MeetingSlot") -> bool:
        """Check if ``other`` covers a strict subset of this slot's hours."""
        if other.duration >= self.duration:
            return False
        own_hours = set(self.hours)
        return all(hour in own_hours for hour in other.hours)

    def format_time_range(self) -> str:
        return f"{self.start_hour:02d}:00 - {self.end_hour:02d}:00"


@dataclass(frozen=True)
class MeetingFinderOptions:
    """
    Search parameters for the meeting slot finder.

    Defaults: one to four hour windows, no flex, flex budget of two hours,
    top five results.
    """
    participants: Tuple[TeamMember, ...]
    viewer_timezone: str
    min_duration: int = 1
    max_duration: int = 4
    allow_flex_hours: bool = False
    flex_range: int = 2
    max_results: int = 5

    def __post_init__(self):
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "participants", tuple(self.participants))


@dataclass(frozen=True)
class MeetingFinderResult:
    """Outcome of a meeting search."""
    has_results: bool
    slots: Tuple[MeetingSlot, ...] = field(default_factory=tuple)
    suggestion: Optional[str] = None
    failure_reason: Optional[FailureReason] = None

    @property
    def best_slot(self) -> Optional[MeetingSlot]:
        return self.slots[0] if self.slots else None

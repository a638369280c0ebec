"""
Core business logic for finding meeting slots across timezones.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). The only outside
input is the current instant, which comes from an injectable clock.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from pendulum import DateTime

from .exceptions import InvalidRangeError
from .models import (
    HOURS_IN_DAY,
    FailureReason,
    FlexMember,
    MeetingFinderOptions,
    MeetingFinderResult,
    MeetingQuality,
    MeetingSlot,
    TeamMember,
    unique_members,
)
from .results import assemble_result
from .scoring import FLEX_HOUR_PENALTY, ranking_key, score_slot
from .timezones import Clock, hour_shift, system_clock
from .working_hours import is_within_window, try_flex_hours

logger = logging.getLogger(__name__)

MIN_ATTENDEES = 2
# Half a day in each direction reaches every hour
FULL_DAY_FLEX = HOURS_IN_DAY // 2


class MeetingSlotFinder:
    """
    Finds and ranks meeting windows in the viewer's timezone.

    Algorithm:
    1. Translate every participant's offset relative to the viewer once
    2. For each start hour and duration, classify every participant as
       available, flexing or unavailable
    3. Score each candidate and sort by the ranking key
    4. Drop candidates contained in a better slot of the same quality
    5. If nothing usable remains, work out why and suggest a fix
    """

    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    def find_meeting_slots(self, options: MeetingFinderOptions) -> MeetingFinderResult:
        """
        Search all candidate windows for the given options.

        Args:
            options: Participants, viewer timezone and search bounds

        Returns:
            MeetingFinderResult with the best slots first

        Raises:
            InvalidRangeError: If duration, flex or result bounds are malformed
            InvalidTimezoneError: If any timezone cannot be resolved
        """
        if not options.participants:
            logger.debug("No participants supplied, skipping search")
            return assemble_result([], FailureReason.NO_PARTICIPANTS)

        self._validate(options)

        participants = self._unique_participants(options.participants)
        now = self.clock()
        shifts = {
            member.id: hour_shift(options.viewer_timezone, member.timezone, now)
            for member in participants
        }

        flex_range = options.flex_range if options.allow_flex_hours else 0
        ranked = self._rank_slots(
            participants,
            shifts,
            min_duration=options.min_duration,
            max_duration=options.max_duration,
            flex_range=flex_range,
            max_results=options.max_results,
        )

        if ranked and ranked[0].quality is not MeetingQuality.POOR:
            return assemble_result(ranked, allow_flex_hours=options.allow_flex_hours)

        reason, feasible_duration = self._diagnose(participants, shifts, options)
        logger.debug("No usable slot found: %s", reason.value)
        return assemble_result(ranked, reason, feasible_duration)

    @staticmethod
    def _validate(options: MeetingFinderOptions) -> None:
        if options.min_duration < 1:
            raise InvalidRangeError(
                f"min_duration must be at least 1, got {options.min_duration}"
            )
        if options.max_duration > HOURS_IN_DAY:
            raise InvalidRangeError(
                f"max_duration must be at most {HOURS_IN_DAY}, got {options.max_duration}"
            )
        if options.min_duration > options.max_duration:
            raise InvalidRangeError(
                f"min_duration ({options.min_duration}) must not exceed "
                f"max_duration ({options.max_duration})"
            )
        if options.flex_range < 0:
            raise InvalidRangeError(f"flex_range must not be negative, got {options.flex_range}")
        if options.max_results < 1:
            raise InvalidRangeError(f"max_results must be at least 1, got {options.max_results}")

    @staticmethod
    def _unique_participants(participants: Sequence[TeamMember]) -> List[TeamMember]:
        """Collapse repeated members (same id), keeping the first occurrence."""
        unique = unique_members(participants)
        if len(unique) < len(participants):
            logger.warning(
                "Ignoring %d duplicate participant(s)", len(participants) - len(unique)
            )
        return unique

    def _rank_slots(
        self,
        participants: List[TeamMember],
        shifts: Dict[str, int],
        *,
        min_duration: int,
        max_duration: int,
        flex_range: int,
        max_results: int
    ) -> List[MeetingSlot]:
        candidates: List[MeetingSlot] = []

        for start_hour in range(HOURS_IN_DAY):
            for duration in range(min_duration, max_duration + 1):
                slot = self._evaluate_window(
                    participants, shifts, start_hour, duration, flex_range
                )
                if slot is not None:
                    candidates.append(slot)

        logger.debug(
            "Evaluated %d candidate slots for %d participants (durations %d-%d, flex %d)",
            len(candidates), len(participants), min_duration, max_duration, flex_range
        )

        return self._deduplicate(sorted(candidates, key=ranking_key), max_results)

    def _evaluate_window(
        self,
        participants: List[TeamMember],
        shifts: Dict[str, int],
        start_hour: int,
        duration: int,
        flex_range: int
    ) -> Optional[MeetingSlot]:
        """
        Classify every participant for one window and score it.

        Returns None when too few participants could attend to call it a
        meeting.
        """
        window_hours = [(start_hour + i) % HOURS_IN_DAY for i in range(duration)]
        # A flex only counts when its penalty does not outweigh the attendee
        flex_budget = min(flex_range, (100 // len(participants)) // FLEX_HOUR_PENALTY)

        available: List[TeamMember] = []
        flexing: List[FlexMember] = []
        unavailable: List[TeamMember] = []

        for member in participants:
            local_hours = [(hour + shifts[member.id]) % HOURS_IN_DAY for hour in window_hours]
            start = member.working_hours_start
            end = member.working_hours_end

            if all(is_within_window(hour, start, end) for hour in local_hours):
                available.append(member)
                continue

            flex = try_flex_hours(local_hours, start, end, flex_budget)
            if flex is not None:
                flexing.append(
                    FlexMember(member=member, direction=flex.direction, hours=flex.hours)
                )
            else:
                unavailable.append(member)

        if len(available) + len(flexing) < min(MIN_ATTENDEES, len(participants)):
            return None

        result = score_slot(
            available=len(available),
            flexing=len(flexing),
            unavailable=len(unavailable),
            total_flex_hours=sum(flex.hours for flex in flexing),
        )

        return MeetingSlot(
            start_hour=start_hour,
            end_hour=(start_hour + duration) % HOURS_IN_DAY,
            duration=duration,
            score=result.score,
            quality=result.quality,
            available_members=tuple(available),
            flexing_members=tuple(flexing),
            unavailable_members=tuple(unavailable),
        )

    @staticmethod
    def _deduplicate(ranked: List[MeetingSlot], max_results: int) -> List[MeetingSlot]:
        """
        Keep the best slots, skipping any contained in a better-ranked slot
        of the same quality.
        """
        kept: List[MeetingSlot] = []

        for slot in ranked:
            dominated = any(
                existing.quality is slot.quality and existing.contains(slot)
                for existing in kept
            )
            if not dominated:
                kept.append(slot)
            if len(kept) == max_results:
                break

        return kept

    def _diagnose(
        self,
        participants: List[TeamMember],
        shifts: Dict[str, int],
        options: MeetingFinderOptions
    ) -> Tuple[FailureReason, Optional[int]]:
        """
        Work out which change to the search would have produced a usable slot.

        Returns:
            Tuple of (reason, longest workable duration or None)
        """
        flex_range = options.flex_range if options.allow_flex_hours else 0

        for duration in range(options.min_duration - 1, 0, -1):
            shorter = self._rank_slots(
                participants, shifts,
                min_duration=duration, max_duration=duration,
                flex_range=flex_range, max_results=1,
            )
            if _is_usable(shorter):
                return FailureReason.REDUCE_DURATION, duration

        if not options.allow_flex_hours:
            flexed = self._rank_slots(
                participants, shifts,
                min_duration=options.min_duration, max_duration=options.max_duration,
                flex_range=FULL_DAY_FLEX, max_results=1,
            )
            if _is_usable(flexed):
                return FailureReason.ENABLE_FLEX, None

        return FailureReason.TOO_SPREAD, None


def _is_usable(ranked: List[MeetingSlot]) -> bool:
    return bool(ranked) and ranked[0].quality is not MeetingQuality.POOR


def find_meeting_slots(
    options: MeetingFinderOptions,
    at: Optional[DateTime] = None
) -> MeetingFinderResult:
    """Run a one-off search, optionally pinned to the instant ``at``."""
    finder = MeetingSlotFinder(clock=(lambda: at) if at is not None else system_clock)
    return finder.find_meeting_slots(options)

"""
Packaging of ranked slots into a MeetingFinderResult.
"""

from typing import Optional, Sequence

from .models import FailureReason, MeetingFinderResult, MeetingQuality, MeetingSlot

_SUGGESTIONS = {
    FailureReason.NO_PARTICIPANTS: "Add team members to find meeting times.",
    FailureReason.ENABLE_FLEX: (
        "No overlapping availability found. Try enabling flex hours."
    ),
    FailureReason.TOO_SPREAD: (
        "Participants span too many timezones for any common window. "
        "Try selecting fewer participants."
    ),
}

WEAK_RESULTS_FLEX_HINT = "Results are limited. Try enabling flex hours."
WEAK_RESULTS_PARTICIPANTS_HINT = "Results are limited. Try selecting fewer participants."


def suggestion_for(reason: FailureReason, feasible_duration: Optional[int] = None) -> str:
    """Return the user-facing suggestion for a failure reason."""
    if reason is FailureReason.REDUCE_DURATION:
        hours = feasible_duration or 1
        unit = "hour" if hours == 1 else "hours"
        return (
            "No window of this length works for everyone. "
            f"Reduce the minimum duration to {hours} {unit}."
        )
    return _SUGGESTIONS[reason]


def assemble_result(
    slots: Sequence[MeetingSlot],
    failure_reason: Optional[FailureReason] = None,
    feasible_duration: Optional[int] = None,
    allow_flex_hours: bool = False
) -> MeetingFinderResult:
    """
    Build the final result from ranked slots.

    Args:
        slots: Ranked slots, best first
        failure_reason: Set when the search found nothing usable
        feasible_duration: Longest workable duration for REDUCE_DURATION
        allow_flex_hours: Whether the search already used flex hours

    Returns:
        MeetingFinderResult
    """
    ranked = tuple(slots)

    if failure_reason is not None:
        return MeetingFinderResult(
            has_results=False,
            slots=ranked,
            suggestion=suggestion_for(failure_reason, feasible_duration),
            failure_reason=failure_reason,
        )

    suggestion = None
    if ranked and ranked[0].quality is MeetingQuality.FAIR:
        suggestion = (
            WEAK_RESULTS_PARTICIPANTS_HINT if allow_flex_hours else WEAK_RESULTS_FLEX_HINT
        )

    return MeetingFinderResult(has_results=True, slots=ranked, suggestion=suggestion)

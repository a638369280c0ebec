"""
Slot scoring and ranking.
"""

from dataclasses import dataclass
from typing import Tuple

from .models import MeetingQuality, MeetingSlot

FLEX_HOUR_PENALTY = 5
GOOD_THRESHOLD = 75
FAIR_THRESHOLD = 50


@dataclass(frozen=True)
class SlotScore:
    score: float
    quality: MeetingQuality


def score_slot(
    available: int,
    flexing: int,
    unavailable: int,
    total_flex_hours: int
) -> SlotScore:
    """
    Score a slot from its participant breakdown.

    The base score is the share of participants who can attend (available or
    flexing), out of 100. Every flex-hour consumed costs a fixed penalty, so
    one member flexing two hours costs the same as two members flexing one.

    Quality tiers:
    - excellent: everyone available, nobody flexing
    - good: score >= 75 and nobody unavailable
    - fair: score >= 50
    - poor: anything else
    """
    total = available + flexing + unavailable
    if total == 0:
        return SlotScore(score=0.0, quality=MeetingQuality.POOR)

    base = 100 * (available + flexing) / total
    score = max(0.0, min(100.0, base - FLEX_HOUR_PENALTY * total_flex_hours))

    if unavailable == 0 and flexing == 0:
        quality = MeetingQuality.EXCELLENT
    elif unavailable == 0 and score >= GOOD_THRESHOLD:
        quality = MeetingQuality.GOOD
    elif score >= FAIR_THRESHOLD:
        quality = MeetingQuality.FAIR
    else:
        quality = MeetingQuality.POOR

    return SlotScore(score=score, quality=quality)


def ranking_key(slot: MeetingSlot) -> Tuple[float, int, int, int]:
    """Sort key: higher score, fewer flex-hours, earlier start, shorter duration."""
    return (-slot.score, slot.total_flex_hours, slot.start_hour, slot.duration)

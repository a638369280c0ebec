"""
Tests for working-window and flex evaluation.
"""

import pytest

from teamoverlap.domain.models import FlexDirection, FlexShift
from teamoverlap.domain.working_hours import (
    is_within_window,
    shift_needed,
    try_flex,
    try_flex_hours,
)


class TestIsWithinWindow:
    """Tests for is_within_window."""

    @pytest.mark.parametrize("hour,expected", [(8, False), (9, True), (16, True), (17, False)])
    def test_regular_window(self, hour, expected):
        """Start is inclusive, end is exclusive."""
        assert is_within_window(hour, 9, 17) is expected

    @pytest.mark.parametrize("hour,expected", [(23, True), (3, True), (22, True), (6, False), (10, False)])
    def test_window_wrapping_midnight(self, hour, expected):
        assert is_within_window(hour, 22, 6) is expected

    def test_equal_bounds_always_available(self):
        assert all(is_within_window(hour, 8, 8) for hour in range(24))


class TestTryFlex:
    """Tests for try_flex."""

    def test_inside_window_needs_no_flex(self):
        assert try_flex(10, 9, 17, 2) is None

    def test_early(self):
        assert try_flex(8, 9, 17, 2) == FlexShift(direction=FlexDirection.EARLY, hours=1)
        assert try_flex(7, 9, 17, 2) == FlexShift(direction=FlexDirection.EARLY, hours=2)

    def test_late(self):
        """Covering the end hour itself takes one hour of late flex."""
        assert try_flex(17, 9, 17, 2) == FlexShift(direction=FlexDirection.LATE, hours=1)
        assert try_flex(18, 9, 17, 2) == FlexShift(direction=FlexDirection.LATE, hours=2)

    def test_out_of_reach(self):
        assert try_flex(6, 9, 17, 2) is None
        assert try_flex(19, 9, 17, 2) is None

    def test_zero_budget(self):
        assert try_flex(8, 9, 17, 0) is None

    def test_tie_prefers_late(self):
        """Hour 7 is two hours from both ends of a 9-6 window."""
        assert try_flex(7, 9, 6, 2) == FlexShift(direction=FlexDirection.LATE, hours=2)

    def test_smallest_shift_wins(self):
        """Hour 8 is one hour before start but two after end."""
        assert try_flex(8, 9, 6, 2) == FlexShift(direction=FlexDirection.EARLY, hours=1)

    def test_wrapping_window(self):
        assert try_flex(21, 22, 6, 1) == FlexShift(direction=FlexDirection.EARLY, hours=1)
        assert try_flex(6, 22, 6, 1) == FlexShift(direction=FlexDirection.LATE, hours=1)


class TestTryFlexHours:
    """Tests for try_flex_hours over whole windows."""

    def test_worst_case_hour_sets_the_shift(self):
        assert try_flex_hours([16, 17, 18], 9, 17, 2) == FlexShift(FlexDirection.LATE, 2)
        assert try_flex_hours([7, 8, 9], 9, 17, 2) == FlexShift(FlexDirection.EARLY, 2)

    def test_both_sides_uncovered(self):
        """A window sticking out on both sides needs more than a small flex."""
        assert try_flex_hours(list(range(8, 18)), 9, 17, 2) is None

    def test_fully_covered(self):
        assert try_flex_hours([9, 10, 11], 9, 17, 2) is None

    def test_shift_needed(self):
        assert shift_needed(7, 9, 17, FlexDirection.EARLY) == 2
        assert shift_needed(7, 9, 17, FlexDirection.LATE) == 15
        assert shift_needed(10, 9, 17, FlexDirection.LATE) == 0

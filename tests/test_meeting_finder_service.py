"""
Tests for the MeetingFinderService orchestration layer.
"""

from typing import Dict, List, Sequence

import pendulum
import pytest

from teamoverlap.config import SearchDefaults
from teamoverlap.domain.exceptions import UnknownParticipantError
from teamoverlap.domain.models import FailureReason, MeetingQuality, TeamMember
from teamoverlap.domain.slot_search import MeetingSlotFinder
from teamoverlap.services.meeting_finder import MeetingFinderService

AT = pendulum.datetime(2024, 1, 15, 10, 0, tz="UTC")


class StubTeamDirectory:
    """Minimal stub matching TeamDirectoryProtocol."""

    def __init__(self, members: List[TeamMember], groups: Dict[str, List[str]]):
        self._members = {member.id: member for member in members}
        self._groups = groups
        self.calls: List[str] = []

    def get_members(self) -> List[TeamMember]:
        self.calls.append("get_members")
        return list(self._members.values())

    def resolve_participants(self, identifiers: Sequence[str]) -> List[TeamMember]:
        self.calls.append("resolve_participants")
        missing = [identifier for identifier in identifiers if identifier not in self._members]
        if missing:
            raise UnknownParticipantError(f"Unknown participant identifier(s): {missing}")
        return [self._members[identifier] for identifier in identifiers]

    def members_in_group(self, identifier: str) -> List[TeamMember]:
        self.calls.append("members_in_group")
        return [self._members[member_id] for member_id in self._groups[identifier]]


def _member(member_id: str, timezone: str = "UTC", start: int = 9, end: int = 17) -> TeamMember:
    return TeamMember(
        id=member_id,
        name=member_id.capitalize(),
        timezone=timezone,
        working_hours_start=start,
        working_hours_end=end,
    )


def _build_service(defaults: SearchDefaults | None = None) -> MeetingFinderService:
    directory = StubTeamDirectory(
        members=[
            _member("alice"),
            _member("bob"),
            _member("kenji", "Asia/Tokyo"),
        ],
        groups={"eng": ["alice", "bob"], "apac": ["kenji"]},
    )
    finder = MeetingSlotFinder(clock=lambda: AT)
    return MeetingFinderService(team_directory=directory, slot_finder=finder, defaults=defaults)


class TestSelectParticipants:
    """Tests for participant selection."""

    def test_whole_team_by_default(self):
        service = _build_service()

        members = service.select_participants()

        assert [member.id for member in members] == ["alice", "bob", "kenji"]

    def test_group_plus_identifiers_without_duplicates(self):
        service = _build_service()

        members = service.select_participants(identifiers=["bob", "kenji"], group="eng")

        assert [member.id for member in members] == ["alice", "bob", "kenji"]

    def test_unknown_identifier_propagates(self):
        service = _build_service()

        with pytest.raises(UnknownParticipantError):
            service.select_participants(identifiers=["zoe"])


class TestBuildOptions:
    """Tests for option construction."""

    def test_defaults_from_config(self):
        defaults = SearchDefaults(min_duration=2, max_duration=3, allow_flex_hours=True, flex_range=1)
        service = _build_service(defaults)

        options = service.build_options(participants=[_member("alice")], viewer_timezone="UTC")

        assert options.min_duration == 2
        assert options.max_duration == 3
        assert options.allow_flex_hours is True
        assert options.flex_range == 1
        assert options.max_results == 5

    def test_explicit_overrides_win(self):
        service = _build_service(SearchDefaults(allow_flex_hours=True))

        options = service.build_options(
            participants=[_member("alice")],
            viewer_timezone="UTC",
            min_duration=1,
            max_duration=1,
            allow_flex_hours=False,
        )

        assert options.max_duration == 1
        assert options.allow_flex_hours is False


class TestFindSlots:
    """End-to-end service calls."""

    def test_group_search(self):
        service = _build_service()

        result = service.find_slots(viewer_timezone="UTC", group="eng", max_duration=1)

        assert result.has_results
        assert result.best_slot.start_hour == 9
        assert result.best_slot.quality is MeetingQuality.EXCELLENT

    def test_whole_team_includes_remote_member(self):
        """Kenji works 00-08 UTC, so the best slot leaves him out."""
        service = _build_service()

        result = service.find_slots(viewer_timezone="UTC", max_duration=1)

        assert result.best_slot.quality is MeetingQuality.FAIR
        assert [m.id for m in result.best_slot.unavailable_members] == ["kenji"]

    def test_empty_identifiers_search_whole_team(self):
        service = _build_service()

        result = service.find_slots(viewer_timezone="UTC", identifiers=[])

        assert result.has_results

    def test_empty_group_reports_no_participants(self):
        directory = StubTeamDirectory(members=[_member("alice")], groups={"empty": []})
        service = MeetingFinderService(
            team_directory=directory,
            slot_finder=MeetingSlotFinder(clock=lambda: AT),
        )

        result = service.find_slots(viewer_timezone="UTC", group="empty")

        assert not result.has_results
        assert result.failure_reason is FailureReason.NO_PARTICIPANTS


class TestCurrentStatus:
    """Tests for the status shortcut."""

    def test_uses_finder_clock(self):
        service = _build_service()

        team = service.current_status()

        # 10:00 UTC: alice and bob are working, kenji (19:00 Tokyo) is off
        assert [s.member.id for s in team.working] == ["alice", "bob"]
        assert team.starting_soon == []

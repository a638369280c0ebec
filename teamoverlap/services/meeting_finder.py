"""
Application services for finding shared meeting slots.

The service resolves participants via a team directory and delegates the
actual search to the domain-level ``MeetingSlotFinder``. This keeps the CLI
thin and improves testability by allowing the roster to be stubbed via a
simple protocol.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from ..config import SearchDefaults
from ..domain.models import (
    MeetingFinderOptions,
    MeetingFinderResult,
    TeamMember,
    unique_members,
)
from ..domain.slot_search import MeetingSlotFinder
from ..domain.team_status import TeamStatus, team_status

logger = logging.getLogger(__name__)


class TeamDirectoryProtocol(Protocol):
    """Protocol describing the roster behaviour needed by the service."""

    def get_members(self) -> List[TeamMember]:
        """Return every team member."""

    def resolve_participants(self, identifiers: Sequence[str]) -> List[TeamMember]:
        """Return the members matching the given ids or names."""

    def members_in_group(self, identifier: str) -> List[TeamMember]:
        """Return the members of a group."""


class MeetingFinderService:
    """
    Orchestrates participant selection and slot search.

    Dependency inversion toward a protocol makes it easy to plug in the YAML
    configuration or an in-memory roster in tests.
    """

    def __init__(
        self,
        team_directory: TeamDirectoryProtocol,
        slot_finder: MeetingSlotFinder,
        defaults: Optional[SearchDefaults] = None,
    ) -> None:
        self._team_directory = team_directory
        self._slot_finder = slot_finder
        self._defaults = defaults or SearchDefaults()

    def select_participants(
        self,
        *,
        identifiers: Sequence[str] = (),
        group: Optional[str] = None,
    ) -> List[TeamMember]:
        """
        Pick the members to search for.

        A group contributes all its members; explicit identifiers are added
        after them. With neither, the whole team is used.
        """
        if not identifiers and group is None:
            return self._team_directory.get_members()

        selected: List[TeamMember] = []
        if group is not None:
            selected.extend(self._team_directory.members_in_group(group))
        if identifiers:
            selected.extend(self._team_directory.resolve_participants(identifiers))

        return unique_members(selected)

    def build_options(
        self,
        *,
        participants: Sequence[TeamMember],
        viewer_timezone: str,
        min_duration: Optional[int] = None,
        max_duration: Optional[int] = None,
        allow_flex_hours: Optional[bool] = None,
        flex_range: Optional[int] = None,
    ) -> MeetingFinderOptions:
        """Combine explicit overrides with the configured search defaults."""
        defaults = self._defaults
        return MeetingFinderOptions(
            participants=tuple(participants),
            viewer_timezone=viewer_timezone,
            min_duration=defaults.min_duration if min_duration is None else min_duration,
            max_duration=defaults.max_duration if max_duration is None else max_duration,
            allow_flex_hours=(
                defaults.allow_flex_hours if allow_flex_hours is None else allow_flex_hours
            ),
            flex_range=defaults.flex_range if flex_range is None else flex_range,
            max_results=defaults.max_results,
        )

    def find_slots(
        self,
        *,
        viewer_timezone: str,
        identifiers: Sequence[str] = (),
        group: Optional[str] = None,
        min_duration: Optional[int] = None,
        max_duration: Optional[int] = None,
        allow_flex_hours: Optional[bool] = None,
        flex_range: Optional[int] = None,
    ) -> MeetingFinderResult:
        """Resolve participants, build options and run the search."""
        participants = self.select_participants(identifiers=identifiers, group=group)
        options = self.build_options(
            participants=participants,
            viewer_timezone=viewer_timezone,
            min_duration=min_duration,
            max_duration=max_duration,
            allow_flex_hours=allow_flex_hours,
            flex_range=flex_range,
        )

        logger.info(
            "Searching meeting slots for %d participant(s) in %s",
            len(options.participants), viewer_timezone
        )
        result = self._slot_finder.find_meeting_slots(options)

        if not result.has_results:
            logger.info("No usable meeting slot: %s", result.suggestion)

        return result

    def current_status(self, *, group: Optional[str] = None) -> TeamStatus:
        """Classify members at the finder's current instant."""
        members = self.select_participants(group=group)
        return team_status(members, self._slot_finder.clock())

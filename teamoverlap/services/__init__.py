"""
Service layer helpers that orchestrate the roster and domain logic.
"""

from .meeting_finder import MeetingFinderService, TeamDirectoryProtocol

__all__ = ["MeetingFinderService", "TeamDirectoryProtocol"]

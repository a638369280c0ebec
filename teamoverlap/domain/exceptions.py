"""
Domain-specific exception hierarchy for the teamoverlap application.
"""


class TeamOverlapError(Exception):
    """Base class for all application-level errors."""


class InvalidTimezoneError(TeamOverlapError, ValueError):
    """Raised when a timezone identifier cannot be resolved."""

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"Unknown timezone: '{timezone}'")


class InvalidRangeError(TeamOverlapError, ValueError):
    """Raised when duration or flex bounds are malformed."""


class UnknownParticipantError(TeamOverlapError, ValueError):
    """Raised when a participant identifier matches no team member."""


class UnknownGroupError(TeamOverlapError, ValueError):
    """Raised when a group identifier matches no configured group."""

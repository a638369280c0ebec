"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import InvalidTimezoneError, UnknownGroupError, UnknownParticipantError
from .domain.models import TeamMember, unique_members
from .domain.timezones import COMMON_TIMEZONES, resolve_timezone


class SearchDefaults(BaseModel):
    """Default settings for meeting searches."""
    min_duration: int = 1
    max_duration: int = 4
    allow_flex_hours: bool = False
    flex_range: int = 2
    max_results: int = 5

    @field_validator("min_duration", "max_duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure durations are whole hours within one day."""
        if not 1 <= value <= 24:
            raise ValueError(f"Duration must be between 1 and 24 hours, got {value}")
        return value

    @field_validator("flex_range")
    @classmethod
    def validate_flex_range(cls, value: int) -> int:
        if not 0 <= value <= 12:
            raise ValueError(f"flex_range must be between 0 and 12, got {value}")
        return value

    @field_validator("max_results")
    @classmethod
    def validate_max_results(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_results must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_duration_order(self) -> "SearchDefaults":
        """Ensure the duration range is not inverted."""
        if self.min_duration > self.max_duration:
            raise ValueError("min_duration must not exceed max_duration")
        return self


class GroupConfig(BaseModel):
    """A named group of team members."""
    id: str
    name: str
    order: int = 0


class MemberConfig(BaseModel):
    """Team member configuration."""
    id: str
    name: str
    title: str = ""
    timezone: str
    working_hours_start: int = 9
    working_hours_end: int = 17
    group: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        if len(value) > 100:
            raise ValueError("Name must be 100 characters or less")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Only timezones from the supported catalog are accepted."""
        if value not in COMMON_TIMEZONES:
            raise ValueError(
                f"Unsupported timezone '{value}'. "
                f"Choose one of: {', '.join(COMMON_TIMEZONES)}"
            )
        return value

    @field_validator("working_hours_start", "working_hours_end")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    def to_team_member(self) -> TeamMember:
        return TeamMember(
            id=self.id,
            name=self.name,
            title=self.title,
            timezone=self.timezone,
            working_hours_start=self.working_hours_start,
            working_hours_end=self.working_hours_end,
            group_id=self.group,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    viewer_timezone: str = "Europe/Berlin"
    search: SearchDefaults = Field(default_factory=SearchDefaults)
    groups: List[GroupConfig] = Field(default_factory=list)
    members: List[MemberConfig] = Field(default_factory=list)

    @field_validator("viewer_timezone")
    @classmethod
    def validate_viewer_timezone(cls, value: str) -> str:
        """The viewer may use any resolvable timezone, not only the catalog."""
        try:
            resolve_timezone(value)
        except InvalidTimezoneError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("members")
    @classmethod
    def validate_members(cls, value: List[MemberConfig]) -> List[MemberConfig]:
        """Ensure member ids and names are unique."""
        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for member in value:
            name_key = member.name.lower()
            if member.id in seen_ids:
                raise ValueError(f"Duplicate member id detected: {member.id}")
            if name_key in seen_names:
                raise ValueError(f"Duplicate member name detected: {member.name}")
            seen_ids.add(member.id)
            seen_names.add(name_key)
        return value

    @model_validator(mode="after")
    def validate_group_references(self) -> "AppConfig":
        """Ensure every member group refers to a configured group."""
        group_ids = {group.id for group in self.groups}
        for member in self.members:
            if member.group is not None and member.group not in group_ids:
                raise ValueError(
                    f"Member '{member.name}' references unknown group '{member.group}'"
                )
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def get_members(self) -> List[TeamMember]:
        """Return all configured members as domain objects."""
        return [member.to_team_member() for member in self.members]

    def get_groups(self) -> List[GroupConfig]:
        """Return groups in display order."""
        return sorted(self.groups, key=lambda group: (group.order, group.name))

    def find_member(self, identifier: str) -> MemberConfig | None:
        """Find a member by id or (case-insensitive) name."""
        for member in self.members:
            if member.id == identifier or member.name.lower() == identifier.lower():
                return member
        return None

    def find_group(self, identifier: str) -> GroupConfig | None:
        """Find a group by id or (case-insensitive) name."""
        for group in self.groups:
            if group.id == identifier or group.name.lower() == identifier.lower():
                return group
        return None

    def resolve_participants(self, identifiers: Sequence[str]) -> List[TeamMember]:
        """
        Resolve member ids or names to team members, ensuring uniqueness.

        Args:
            identifiers: Member ids or names

        Returns:
            List of unique team members, in the order given

        Raises:
            UnknownParticipantError: If any identifier matches no member
        """
        resolved: List[TeamMember] = []
        unknown_identifiers: List[str] = []

        for identifier in identifiers:
            member = self.find_member(identifier)
            if member is None:
                unknown_identifiers.append(identifier)
                continue

            resolved.append(member.to_team_member())

        if unknown_identifiers:
            missing = ", ".join(sorted(set(unknown_identifiers)))
            raise UnknownParticipantError(
                f"Unknown participant identifier(s): {missing}. "
                "Use a configured member id or name."
            )

        return unique_members(resolved)

    def members_in_group(self, identifier: str) -> List[TeamMember]:
        """
        Return the members of a group.

        Raises:
            UnknownGroupError: If no group matches ``identifier``
        """
        group = self.find_group(identifier)
        if group is None:
            raise UnknownGroupError(f"Unknown group: '{identifier}'")
        return [member for member in self.get_members() if member.group_id == group.id]


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

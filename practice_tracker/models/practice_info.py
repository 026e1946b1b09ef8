"""
PracticeInfo model for the Practice Efficiency Tracker application.

This module contains the metadata record describing a practice session:
who trains, when, and how many drills are planned.
"""
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict

from ..utils import now_iso


def parse_number(value: Any) -> float:
    """Parse a user supplied number, falling back to 0 on invalid or non-finite input."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        parsed = float(value) if isinstance(value, float) else float(str(value).strip())
    except (OverflowError, ValueError):
        return 0
    if not math.isfinite(parsed):
        return 0
    return int(parsed) if parsed.is_integer() else parsed


def parse_count(value: Any) -> int:
    """Parse a non-negative integer count, falling back to 0."""
    try:
        return max(0, int(parse_number(value)))
    except (OverflowError, ValueError):
        return 0


@dataclass
class PracticeInfo:
    """
    Metadata for a single practice session.

    Attributes:
        club_name: Name of the club
        team_name: Name of the team training
        date: Practice date as ISO 8601 string
        coach_name: Coach running the practice
        evaluation: Free numeric rating of the practice
        athletes_number: Number of athletes attending
        coaches_number: Number of coaches attending
        total_time: Planned practice length in hours
        tracked_player_name: Player observed during tracking, if any
        drills_number: Number of drills planned (drives drill generation)
    """
    club_name: str = ""
    team_name: str = ""
    date: str = field(default_factory=now_iso)
    coach_name: str = ""
    evaluation: float = 0
    athletes_number: int = 0
    coaches_number: int = 0
    total_time: float = 0
    tracked_player_name: str = ""
    drills_number: int = 0

    NUMERIC_FIELDS = ("evaluation", "total_time")
    COUNT_FIELDS = ("drills_number", "athletes_number", "coaches_number")

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def apply(self, **changes: Any) -> Dict[str, Any]:
        """
        Apply field changes with lenient numeric parsing.

        ``drills_number`` is parsed but the caller is responsible for
        regenerating drills when it changes.

        Returns:
            Mapping of the fields that were actually applied
        """
        applied: Dict[str, Any] = {}
        known = self.field_names()
        for name, value in changes.items():
            if name not in known:
                continue
            if name in self.COUNT_FIELDS:
                value = parse_count(value)
            elif name in self.NUMERIC_FIELDS:
                value = parse_number(value)
            else:
                value = "" if value is None else str(value)
            setattr(self, name, value)
            applied[name] = value
        return applied

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {name: getattr(self, name) for name in self.field_names()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PracticeInfo":
        """Create from dictionary, parsing values leniently."""
        info = cls()
        info.apply(**(data or {}))
        return info

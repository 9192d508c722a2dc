"""Data models for users."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class User:
    """A user and the ids of the teams they belong to."""

    id: str
    associated_teams: list[str] = field(default_factory=list)

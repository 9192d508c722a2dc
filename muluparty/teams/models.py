"""Data models for teams."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from muluparty.core.codecs import Completion

if TYPE_CHECKING:
    from muluparty.challenge.models import Challenge
    from muluparty.tournament.models import Tournament
    from muluparty.user.models import User


@dataclass
class TeamMetadata:
    """What a caller needs after creating a team."""

    identifier: str
    join_code: str


@dataclass
class CompletedChallenge:
    """A challenge and the users who completed it for the team."""

    challenge: Challenge
    completions: list[tuple[User, datetime.datetime]]


@dataclass
class Team:
    """A team, as validated from its stored document.

    ``participants`` maps user ids to bonus points and ``ledger`` maps
    challenge ids to completions; both are plain, possibly empty, collections.
    ``completed_challenges`` and ``tournament`` are only filled in when the
    team is fully materialized by ``TeamService.get_team``.
    """

    id: str
    name: str
    join_code: str
    participants: dict[str, int]
    ledger: dict[str, list[Completion]] = field(default_factory=dict)
    tournament_id: Optional[str] = None
    additional_points: int = 0
    completed_challenges: list[CompletedChallenge] = field(default_factory=list)
    tournament: Optional[Tournament] = None

    def total_points(self) -> int:
        """Bonus, participant and challenge points added together."""
        challenge_points = sum(
            completed.challenge.point_value * len(completed.completions)
            for completed in self.completed_challenges
        )
        return (
            self.additional_points + sum(self.participants.values()) + challenge_points
        )

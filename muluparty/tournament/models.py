"""Data models for tournaments."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from muluparty.teams.models import Team


@dataclass
class Tournament:
    """A tournament and the ids of its participating teams.

    ``teams`` is a read-through cache filled once by
    ``TournamentService.get_teams`` and never invalidated.
    """

    id: str
    name: str
    start_date: datetime.datetime
    end_date: datetime.datetime
    team_ids: list[str] = field(default_factory=list)
    teams: Optional[list[Team]] = None

    def leaderboard(self) -> list[tuple[Team, int]] | None:
        """Teams with their total points, highest first."""
        if self.teams is None:
            logging.warning(f"Teams of tournament {self.id} haven't been loaded.")
            return None
        standings = [(team, team.total_points()) for team in self.teams]
        standings.sort(key=lambda entry: entry[1], reverse=True)
        return standings

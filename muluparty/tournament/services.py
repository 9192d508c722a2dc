"""Service layer for tournaments and their team assignments."""

from __future__ import annotations

import datetime
import logging
from functools import partial

from muluparty.core.codecs import encode_id_set, unique_ids
from muluparty.core.constants import TOURNAMENT_TEAMS, TOURNAMENTS_COLLECTION
from muluparty.core.fanout import fan_out
from muluparty.core.store import RemoteStore, get_store
from muluparty.errors import (
    AppError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from muluparty.teams.models import Team
from muluparty.teams.services import TeamService

from .models import Tournament
from .serializers import deserialize_tournament, serialize_tournament


def _tournament_path(tournament_id: str) -> str:
    return f"{TOURNAMENTS_COLLECTION}/{tournament_id}"


class TournamentService:
    """Service class for tournament-related operations."""

    @staticmethod
    def load_tournament(store: RemoteStore, tournament_id: str) -> Tournament:
        """Fetch a tournament without loading its teams."""
        data = store.get(_tournament_path(tournament_id))
        if data is None:
            raise NotFoundError(
                f'No Tournament exists with the identifier "{tournament_id}".'
            )
        return deserialize_tournament(tournament_id, data)

    @staticmethod
    def write_teams(store: RemoteStore, tournament: Tournament) -> None:
        """Persist a tournament's team id set."""
        store.update(
            _tournament_path(tournament.id),
            {TOURNAMENT_TEAMS: encode_id_set(tournament.team_ids)},
        )

    @staticmethod
    def detach_team(
        store: RemoteStore, team_id: str, tournament_id: str, is_deleting: bool = False
    ) -> None:
        """Remove a team from a tournament and clear the team's assignment.

        Unless the tournament is being deleted, removing its last team is
        rejected before anything is written. The team's assignment is only
        cleared if it still points at this tournament.
        """
        tournament = TournamentService.load_tournament(store, tournament_id)
        remaining = [t for t in tournament.team_ids if t != team_id]
        if not is_deleting and not remaining:
            raise InvariantViolationError(
                "Removing this Team would leave the Tournament with no "
                "participating Teams; delete the Tournament instead."
            )
        team = TeamService.load_team(store, team_id)

        if remaining != tournament.team_ids:
            tournament.team_ids = remaining
            TournamentService.write_teams(store, tournament)
        if team.tournament_id == tournament_id:
            TeamService.write_tournament(store, team_id, None)

    @staticmethod
    def _release_team(store: RemoteStore, team_id: str, tournament_id: str) -> None:
        team = TeamService.load_team(store, team_id)
        if team.tournament_id == tournament_id:
            TeamService.write_tournament(store, team_id, None)

    @staticmethod
    def create_tournament(
        name: str,
        start_date: datetime.datetime,
        end_date: datetime.datetime,
        team_ids: list[str],
        store: RemoteStore | None = None,
    ) -> tuple[str | None, str | None]:
        """Create a tournament and assign the given teams to it.

        Returns the new id, or an error if the tournament could not be
        created or any team could not be assigned.
        """
        if store is None:
            store = get_store()
        try:
            if not team_ids:
                raise ValidationError("A Tournament needs at least one Team.")
            if end_date < start_date:
                raise ValidationError("A Tournament cannot end before it starts.")
            key = store.generate_key(TOURNAMENTS_COLLECTION)
            tournament = Tournament(
                id=key, name=name, start_date=start_date, end_date=end_date
            )
            store.set(_tournament_path(key), dict(serialize_tournament(tournament)))
        except AppError as e:
            logging.error(f"Error creating tournament '{name}': {e.message}")
            return None, e.message

        error = TeamService.add_teams_to_tournament(unique_ids(team_ids), key, store)
        if error:
            logging.warning(f"Tournament {key} created with errors: {error}")
            return None, error
        return key, None

    @staticmethod
    def remove_team_from_tournament(
        team_id: str,
        tournament_id: str,
        is_deleting: bool = False,
        store: RemoteStore | None = None,
    ) -> str | None:
        """Remove a team from a tournament, updating both documents."""
        if store is None:
            store = get_store()
        try:
            TournamentService.detach_team(store, team_id, tournament_id, is_deleting)
            logging.info(f"Removed team {team_id} from tournament {tournament_id}.")
            return None
        except AppError as e:
            logging.warning(
                f"Error removing team {team_id} from tournament {tournament_id}: "
                f"{e.message}"
            )
            return e.message

    @staticmethod
    def get_teams(
        tournament: Tournament, store: RemoteStore | None = None
    ) -> tuple[list[Team] | None, str | None]:
        """Load a tournament's teams, caching them on the tournament.

        If any team fails to load nothing is returned or cached.

        Once loaded, the cached teams are returned without touching the
        store again.
        """
        if tournament.teams is not None:
            return tournament.teams, None
        if not tournament.team_ids:
            tournament.teams = []
            return tournament.teams, None
        teams, errors = TeamService.get_teams(tournament.team_ids, store)
        if errors:
            return None, "\n".join(errors)
        tournament.teams = teams
        return teams, None

    @staticmethod
    def delete_tournament(
        tournament_id: str, store: RemoteStore | None = None
    ) -> str | None:
        """Detach every team from a tournament, then delete it.

        If any team cannot be detached the tournament document is kept.
        """
        if store is None:
            store = get_store()
        try:
            tournament = TournamentService.load_tournament(store, tournament_id)
            outcome = fan_out(
                [
                    partial(TournamentService._release_team, store, tid, tournament_id)
                    for tid in tournament.team_ids
                ]
            )
            if not outcome.succeeded:
                raise AppError(outcome.error_descriptor)
            store.delete(_tournament_path(tournament_id))
            logging.info(f"Deleted tournament {tournament_id}.")
            return None
        except AppError as e:
            logging.error(f"Error deleting tournament {tournament_id}: {e.message}")
            return e.message

    @staticmethod
    def get_tournament(
        tournament_id: str, store: RemoteStore | None = None
    ) -> tuple[Tournament | None, str | None]:
        """Get one tournament. Returns the tournament or an error, never both."""
        if store is None:
            store = get_store()
        try:
            return TournamentService.load_tournament(store, tournament_id), None
        except AppError as e:
            return None, e.message

    @staticmethod
    def get_tournaments(
        tournament_ids: list[str], store: RemoteStore | None = None
    ) -> tuple[list[Tournament] | None, list[str] | None]:
        """Get several tournaments concurrently. Both values may be set."""
        if not tournament_ids:
            return None, ["No identifiers passed!"]
        if store is None:
            store = get_store()
        outcome = fan_out(
            [
                partial(TournamentService.load_tournament, store, tid)
                for tid in tournament_ids
            ]
        )
        return outcome.results or None, outcome.errors or None

    @staticmethod
    def get_all_tournaments(
        store: RemoteStore | None = None,
    ) -> tuple[list[Tournament] | None, str | None]:
        """Get every tournament. Both values may be set."""
        if store is None:
            store = get_store()
        try:
            tournament_ids = list(store.children(TOURNAMENTS_COLLECTION))
        except AppError as e:
            return None, e.message
        if not tournament_ids:
            return [], None
        tournaments, errors = TournamentService.get_tournaments(tournament_ids, store)
        return tournaments, "\n".join(errors) if errors else None

"""JSON routes for tournaments."""

from __future__ import annotations

import datetime
from typing import Any

from muluparty.core.codecs import format_date
from muluparty.core.forms import form_error_message
from muluparty.core.responses import api_failure, api_success
from muluparty.teams.services import TeamService

from . import bp
from .forms import AddTeamsForm, CreateTournamentForm
from .models import Tournament
from .services import TournamentService


def tournament_payload(tournament: Tournament) -> dict[str, Any]:
    """JSON-ready view of a tournament."""
    return {
        "id": tournament.id,
        "name": tournament.name,
        "startDate": format_date(tournament.start_date),
        "endDate": format_date(tournament.end_date),
        "teamIds": list(tournament.team_ids),
    }


@bp.route("/", methods=["POST"])
def create_tournament() -> Any:
    """Create a tournament with at least one team."""
    form = CreateTournamentForm()
    if not form.validate_on_submit():
        return api_failure(form_error_message(form))

    tournament_id, error = TournamentService.create_tournament(
        form.name.data,
        datetime.datetime.combine(form.start_date.data, datetime.time.min),
        datetime.datetime.combine(form.end_date.data, datetime.time.min),
        form.team_ids.data,
    )
    if tournament_id is None:
        return api_failure(error or "Unable to create the Tournament.")
    return api_success("Tournament created.", {"id": tournament_id}, 201)


@bp.route("/<string:tournament_id>", methods=["GET"])
def view_tournament(tournament_id: str) -> Any:
    tournament, error = TournamentService.get_tournament(tournament_id)
    if tournament is None:
        return api_failure(error or "Tournament not found.", 404)
    return api_success("OK", tournament_payload(tournament))


@bp.route("/<string:tournament_id>", methods=["DELETE"])
def delete_tournament(tournament_id: str) -> Any:
    error = TournamentService.delete_tournament(tournament_id)
    if error:
        return api_failure(error)
    return api_success("Tournament deleted.")


@bp.route("/<string:tournament_id>/leaderboard", methods=["GET"])
def leaderboard(tournament_id: str) -> Any:
    """Teams of a tournament ranked by total points."""
    tournament, error = TournamentService.get_tournament(tournament_id)
    if tournament is None:
        return api_failure(error or "Tournament not found.", 404)

    _, error = TournamentService.get_teams(tournament)
    standings = tournament.leaderboard()
    if standings is None:
        return api_failure(error or "Unable to load the Tournament's Teams.", 502)

    payload = tournament_payload(tournament)
    payload["leaderboard"] = [
        {"teamId": team.id, "name": team.name, "points": points}
        for team, points in standings
    ]
    return api_success("OK", payload)


@bp.route("/<string:tournament_id>/teams", methods=["POST"])
def add_teams(tournament_id: str) -> Any:
    """Assign several teams to a tournament."""
    form = AddTeamsForm()
    if not form.validate_on_submit():
        return api_failure(form_error_message(form))

    error = TeamService.add_teams_to_tournament(form.team_ids.data, tournament_id)
    if error:
        return api_failure(error)
    return api_success("Teams added to tournament.")


@bp.route("/<string:tournament_id>/teams/<string:team_id>", methods=["DELETE"])
def remove_team(tournament_id: str, team_id: str) -> Any:
    error = TournamentService.remove_team_from_tournament(team_id, tournament_id)
    if error:
        return api_failure(error)
    return api_success("Team removed from tournament.")

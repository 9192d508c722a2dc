"""JSON routes for teams and their memberships."""

from __future__ import annotations

from typing import Any

from flask import request

from muluparty.core.codecs import format_date
from muluparty.core.forms import form_error_message
from muluparty.core.responses import api_failure, api_success

from . import bp
from .forms import CreateTeamForm, JoinTeamForm, JoinTeamsForm
from .models import Team
from .services import TeamService


def team_payload(team: Team) -> dict[str, Any]:
    """JSON-ready view of a materialized team."""
    return {
        "id": team.id,
        "name": team.name,
        "joinCode": team.join_code,
        "participants": dict(team.participants),
        "tournamentId": team.tournament_id,
        "additionalPoints": team.additional_points,
        "totalPoints": team.total_points(),
        "completedChallenges": [
            {
                "challengeId": completed.challenge.id,
                "title": completed.challenge.title,
                "pointValue": completed.challenge.point_value,
                "completions": [
                    {"userId": user.id, "completedAt": format_date(when)}
                    for user, when in completed.completions
                ],
            }
            for completed in team.completed_challenges
        ],
    }


@bp.route("/", methods=["POST"])
def create_team() -> Any:
    """Create a team from a name and a list of participant ids."""
    form = CreateTeamForm()
    if not form.validate_on_submit():
        return api_failure(form_error_message(form))

    metadata, error = TeamService.create_team(
        form.name.data, {user_id: 0 for user_id in form.participants.data}
    )
    if metadata is None:
        return api_failure(error or "Unable to create the Team.")
    return api_success(
        error or "Team created.",
        {"id": metadata.identifier, "joinCode": metadata.join_code},
        201,
    )


@bp.route("/join", methods=["POST"])
def join_team() -> Any:
    """Add a user to the team with the given join code."""
    form = JoinTeamForm()
    if not form.validate_on_submit():
        return api_failure(form_error_message(form))

    team_id, error = TeamService.get_team_by_join_code(form.join_code.data)
    if team_id is None:
        return api_failure(error or "Unknown join code.", 404)

    error = TeamService.add_user_to_team(form.user_id.data, team_id)
    if error:
        return api_failure(error)
    return api_success("Joined team.", {"id": team_id})


@bp.route("/random", methods=["GET"])
def random_teams() -> Any:
    """Return team ids in random order, optionally limited by `amount`."""
    amount = request.args.get("amount", type=int)
    team_ids, notice = TeamService.get_random_teams(amount)
    if team_ids is None:
        return api_failure(notice or "Unable to draw Teams.")
    return api_success(notice or "OK", {"teamIds": team_ids})


@bp.route("/users/<string:user_id>", methods=["POST"])
def join_teams(user_id: str) -> Any:
    """Add a user to every team in a list."""
    form = JoinTeamsForm()
    if not form.validate_on_submit():
        return api_failure(form_error_message(form))

    error = TeamService.add_user_to_teams(user_id, form.team_ids.data)
    if error:
        return api_failure(error)
    return api_success("User added to teams.")


@bp.route("/<string:team_id>", methods=["GET"])
def view_team(team_id: str) -> Any:
    """Return a fully resolved team."""
    team, error = TeamService.get_team(team_id)
    if team is None:
        return api_failure(error or "Team not found.", 404)
    return api_success("OK", team_payload(team))


@bp.route("/<string:team_id>", methods=["DELETE"])
def delete_team(team_id: str) -> Any:
    """Delete a team after detaching it from its tournament and users."""
    error = TeamService.delete_team(team_id)
    if error:
        return api_failure(error)
    return api_success("Team deleted.")


@bp.route("/<string:team_id>/users/<string:user_id>", methods=["POST"])
def add_user(team_id: str, user_id: str) -> Any:
    """Add a user to a team."""
    error = TeamService.add_user_to_team(user_id, team_id)
    if error:
        return api_failure(error)
    return api_success("User added to team.")


@bp.route("/<string:team_id>/users/<string:user_id>", methods=["DELETE"])
def remove_user(team_id: str, user_id: str) -> Any:
    """Remove a user from a team."""
    error = TeamService.remove_user_from_team(user_id, team_id)
    if error:
        return api_failure(error)
    return api_success("User removed from team.")


@bp.route("/<string:team_id>/tournament/<string:tournament_id>", methods=["POST"])
def assign_tournament(team_id: str, tournament_id: str) -> Any:
    """Assign a team to a tournament."""
    error = TeamService.add_team_to_tournament(team_id, tournament_id)
    if error:
        return api_failure(error)
    return api_success("Team added to tournament.")

"""Conversion between team documents and Team objects."""

from __future__ import annotations

from typing import Any

from muluparty.core.codecs import (
    decode_ledger,
    decode_points,
    encode_ledger,
    encode_points,
)
from muluparty.core.constants import (
    SENTINEL,
    TEAM_ADDITIONAL_POINTS,
    TEAM_ASSOCIATED_TOURNAMENT,
    TEAM_COMPLETED_CHALLENGES,
    TEAM_JOIN_CODE,
    TEAM_NAME,
    TEAM_PARTICIPANTS,
)
from muluparty.core.types import TeamDocument
from muluparty.errors import MalformedDocumentError

from .models import Team


def serialize_team(team: Team) -> TeamDocument:
    """Build the stored form of a team."""
    return {
        "name": team.name,
        "joinCode": team.join_code,
        "participantIdentifiers": encode_points(team.participants),
        "completedChallenges": encode_ledger(team.ledger),
        "associatedTournament": team.tournament_id or SENTINEL,
        "additionalPoints": team.additional_points,
    }


def deserialize_team(team_id: str, data: dict[str, Any]) -> Team:
    """Validate a team document and build a Team without resolving references.

    Every field must be present with its encoded shape, otherwise the whole
    document is rejected.
    """
    for key in (TEAM_NAME, TEAM_JOIN_CODE, TEAM_ASSOCIATED_TOURNAMENT):
        if not isinstance(data.get(key), str):
            raise MalformedDocumentError(f"Team {team_id} has malformed '{key}'.")

    additional_points = data.get(TEAM_ADDITIONAL_POINTS)
    if not isinstance(additional_points, int) or isinstance(additional_points, bool):
        raise MalformedDocumentError(
            f"Team {team_id} has malformed '{TEAM_ADDITIONAL_POINTS}'."
        )

    try:
        participants = decode_points(data.get(TEAM_PARTICIPANTS))
    except MalformedDocumentError as e:
        raise MalformedDocumentError(
            f"Team {team_id} has malformed '{TEAM_PARTICIPANTS}': {e.message}"
        ) from e

    try:
        ledger = decode_ledger(data.get(TEAM_COMPLETED_CHALLENGES))
    except MalformedDocumentError as e:
        raise MalformedDocumentError(
            f"Team {team_id} has malformed '{TEAM_COMPLETED_CHALLENGES}': {e.message}"
        ) from e

    tournament_id = data[TEAM_ASSOCIATED_TOURNAMENT]
    return Team(
        id=team_id,
        name=data[TEAM_NAME],
        join_code=data[TEAM_JOIN_CODE],
        participants=participants,
        ledger=ledger,
        tournament_id=None if tournament_id == SENTINEL else tournament_id,
        additional_points=additional_points,
    )

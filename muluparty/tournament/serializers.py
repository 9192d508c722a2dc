"""Conversion between tournament documents and Tournament objects."""

from __future__ import annotations

from typing import Any

from muluparty.core.codecs import decode_id_set, encode_id_set, format_date, parse_date
from muluparty.core.constants import (
    TOURNAMENT_END_DATE,
    TOURNAMENT_NAME,
    TOURNAMENT_START_DATE,
    TOURNAMENT_TEAMS,
)
from muluparty.core.types import TournamentDocument
from muluparty.errors import MalformedDocumentError

from .models import Tournament


def serialize_tournament(tournament: Tournament) -> TournamentDocument:
    """Build the stored form of a tournament."""
    return {
        "name": tournament.name,
        "startDate": format_date(tournament.start_date),
        "endDate": format_date(tournament.end_date),
        "teamIdentifiers": encode_id_set(tournament.team_ids),
    }


def deserialize_tournament(tournament_id: str, data: dict[str, Any]) -> Tournament:
    """Validate a tournament document and build a Tournament."""
    if not isinstance(data.get(TOURNAMENT_NAME), str):
        raise MalformedDocumentError(f"Unable to deserialize '{TOURNAMENT_NAME}'.")

    dates = {}
    for key in (TOURNAMENT_START_DATE, TOURNAMENT_END_DATE):
        try:
            dates[key] = parse_date(data.get(key))
        except MalformedDocumentError as e:
            raise MalformedDocumentError(f"Unable to deserialize '{key}'.") from e

    try:
        team_ids = decode_id_set(data.get(TOURNAMENT_TEAMS))
    except MalformedDocumentError as e:
        raise MalformedDocumentError(
            f"This Tournament has corrupted '{TOURNAMENT_TEAMS}'."
        ) from e

    return Tournament(
        id=tournament_id,
        name=data[TOURNAMENT_NAME],
        start_date=dates[TOURNAMENT_START_DATE],
        end_date=dates[TOURNAMENT_END_DATE],
        team_ids=team_ids,
    )

"""Conversion between user documents and User objects."""

from __future__ import annotations

from typing import Any

from muluparty.core.codecs import decode_id_set, encode_id_set
from muluparty.core.constants import USER_ASSOCIATED_TEAMS
from muluparty.core.types import UserDocument
from muluparty.errors import MalformedDocumentError

from .models import User


def serialize_user(user: User) -> UserDocument:
    """Build the stored form of a user."""
    return {"associatedTeams": encode_id_set(user.associated_teams)}


def deserialize_user(user_id: str, data: dict[str, Any]) -> User:
    """Validate a user document and build a User."""
    try:
        teams = decode_id_set(data.get(USER_ASSOCIATED_TEAMS))
    except MalformedDocumentError as e:
        raise MalformedDocumentError(
            f"This User has corrupted '{USER_ASSOCIATED_TEAMS}'."
        ) from e
    return User(id=user_id, associated_teams=teams)

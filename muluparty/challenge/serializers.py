"""Conversion between challenge documents and Challenge objects."""

from __future__ import annotations

from typing import Any

from muluparty.core.codecs import format_date, parse_date
from muluparty.core.constants import (
    CHALLENGE_DATE_POSTED,
    CHALLENGE_MEDIA,
    CHALLENGE_POINT_VALUE,
    CHALLENGE_PROMPT,
    CHALLENGE_TITLE,
    MEDIA_TYPES,
    SENTINEL,
)
from muluparty.core.types import ChallengeDocument
from muluparty.errors import MalformedDocumentError

from .models import Challenge, ChallengeMedia


def serialize_challenge(challenge: Challenge) -> ChallengeDocument:
    """Build the stored form of a challenge."""
    media: Any = SENTINEL
    if challenge.media is not None:
        media = {"link": challenge.media.link, "type": challenge.media.type}
    return {
        "title": challenge.title,
        "prompt": challenge.prompt,
        "datePosted": format_date(challenge.date_posted),
        "pointValue": challenge.point_value,
        "media": media,
    }


def _decode_media(raw: Any) -> ChallengeMedia | None:
    if raw == SENTINEL:
        return None
    if (
        not isinstance(raw, dict)
        or not isinstance(raw.get("link"), str)
        or raw.get("type") not in MEDIA_TYPES
    ):
        raise MalformedDocumentError(f"Malformed '{CHALLENGE_MEDIA}'.")
    return ChallengeMedia(link=raw["link"], type=raw["type"])


def deserialize_challenge(challenge_id: str, data: dict[str, Any]) -> Challenge:
    """Validate a challenge document and build a Challenge."""
    for key in (CHALLENGE_TITLE, CHALLENGE_PROMPT):
        if not isinstance(data.get(key), str):
            raise MalformedDocumentError(f"Malformed '{key}'.")

    point_value = data.get(CHALLENGE_POINT_VALUE)
    if not isinstance(point_value, int) or isinstance(point_value, bool):
        raise MalformedDocumentError(f"Malformed '{CHALLENGE_POINT_VALUE}'.")

    try:
        date_posted = parse_date(data.get(CHALLENGE_DATE_POSTED))
    except MalformedDocumentError as e:
        raise MalformedDocumentError(
            f"Malformed '{CHALLENGE_DATE_POSTED}'."
        ) from e

    return Challenge(
        id=challenge_id,
        title=data[CHALLENGE_TITLE],
        prompt=data[CHALLENGE_PROMPT],
        date_posted=date_posted,
        point_value=point_value,
        media=_decode_media(data.get(CHALLENGE_MEDIA)),
    )

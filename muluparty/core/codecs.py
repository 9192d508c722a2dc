"""Encodings between in-memory collections and the store's native types.

The store cannot hold empty maps or lists, and has no tuple type, so two
kinds of value are flattened into delimited strings:

* participant points, ``{"u1": 3}`` <-> ``["u1 – 3"]``
* completion ledgers, ``{"c1": [("u1", when)]}`` <-> ``{"c1": ["u1 – <date>"]}``

Empty collections are written as the ``"!"`` sentinel forms and read back
as real empty collections. Decoders raise ``MalformedDocumentError`` on
anything that does not have exactly the expected shape.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from muluparty.errors import MalformedDocumentError, ValidationError

from .constants import (
    ALTERNATE_DELIMITER,
    DATE_FORMAT,
    DELIMITER,
    EMPTY_POINTS_ENTRY,
    SENTINEL,
)


@dataclass(frozen=True)
class Completion:
    """A single user's completion of a challenge."""

    user_id: str
    completed_at: datetime.datetime


def validate_identifier(value: Any, kind: str = "identifier") -> str:
    """Reject ids that could not be stored and read back unchanged.

    An id must be a non-empty string without surrounding whitespace, must
    not be the sentinel, and must not contain a delimiter dash or a path
    separator.
    """
    if not isinstance(value, str) or not value or value != value.strip():
        raise ValidationError(f"Invalid {kind} {value!r}.")
    if value == SENTINEL:
        raise ValidationError(f"Invalid {kind} {value!r}: '{SENTINEL}' is reserved.")
    for forbidden in (DELIMITER, ALTERNATE_DELIMITER, "/"):
        if forbidden in value:
            raise ValidationError(
                f"Invalid {kind} {value!r}: it cannot contain '{forbidden}'."
            )
    return value


def format_date(value: datetime.date | datetime.datetime) -> str:
    """Format a date or datetime for storage."""
    return value.strftime(DATE_FORMAT)


def parse_date(value: Any) -> datetime.datetime:
    """Parse a stored date string."""
    if not isinstance(value, str):
        raise MalformedDocumentError(f"Expected a date string, got {value!r}.")
    try:
        return datetime.datetime.strptime(value, DATE_FORMAT)
    except ValueError as e:
        raise MalformedDocumentError(
            f"Unable to convert {value!r} to a date."
        ) from e


def _split_pair(entry: Any) -> tuple[str, str]:
    """Split ``"<left> – <right>"``, accepting either dash character."""
    if not isinstance(entry, str):
        raise MalformedDocumentError(f"Expected a delimited string, got {entry!r}.")
    components = entry.split(DELIMITER)
    if len(components) == 1:
        components = entry.split(ALTERNATE_DELIMITER)
    if len(components) != 2:
        raise MalformedDocumentError(f"Improperly delimited entry {entry!r}.")
    left, right = components[0].rstrip(), components[1].lstrip()
    if not left or not right:
        raise MalformedDocumentError(f"Improperly delimited entry {entry!r}.")
    return left, right


def encode_points(points: dict[str, int]) -> list[str]:
    """Encode a user-id -> points map as a sorted list of delimited strings."""
    if not points:
        return [EMPTY_POINTS_ENTRY]
    return sorted(f"{user_id} {DELIMITER} {value}" for user_id, value in points.items())


def decode_points(entries: Any) -> dict[str, int]:
    """Decode a delimited points list; the sentinel list decodes to ``{}``."""
    if not isinstance(entries, list) or not entries:
        raise MalformedDocumentError("Expected a non-empty list of point entries.")

    points: dict[str, int] = {}
    for entry in entries:
        user_id, raw_value = _split_pair(entry)
        try:
            value = int(raw_value)
        except ValueError as e:
            raise MalformedDocumentError(
                f"Point value in {entry!r} is not an integer."
            ) from e
        if user_id in points:
            raise MalformedDocumentError(f"Duplicate point entry for {user_id!r}.")
        points[user_id] = value

    if SENTINEL in points:
        if len(points) > 1:
            raise MalformedDocumentError("Sentinel mixed with point entries.")
        return {}
    return points


def encode_ledger(ledger: dict[str, list[Completion]]) -> dict[str, list[str]]:
    """Encode a challenge-id -> completions ledger."""
    encoded = {
        challenge_id: [
            f"{c.user_id} {DELIMITER} {format_date(c.completed_at)}"
            for c in completions
        ]
        for challenge_id, completions in ledger.items()
        if completions
    }
    return encoded or {SENTINEL: [SENTINEL]}


def decode_ledger(raw: Any) -> dict[str, list[Completion]]:
    """Decode a stored ledger; the sentinel map decodes to ``{}``."""
    if not isinstance(raw, dict) or not raw:
        raise MalformedDocumentError("Expected a non-empty ledger map.")
    if raw == {SENTINEL: [SENTINEL]}:
        return {}

    ledger: dict[str, list[Completion]] = {}
    for challenge_id, entries in raw.items():
        if challenge_id == SENTINEL:
            raise MalformedDocumentError("Sentinel mixed with ledger entries.")
        if not isinstance(entries, list) or not entries:
            raise MalformedDocumentError(
                f"A Challenge's metadata array was improperly formatted ({challenge_id})."
            )
        completions = []
        for entry in entries:
            user_id, raw_date = _split_pair(entry)
            completions.append(Completion(user_id, parse_date(raw_date)))
        ledger[str(challenge_id)] = completions
    return ledger


def without_user(
    ledger: dict[str, list[Completion]], user_id: str
) -> dict[str, list[Completion]]:
    """Return the ledger minus a user's completions, dropping emptied challenges."""
    filtered = {}
    for challenge_id, completions in ledger.items():
        kept = [c for c in completions if c.user_id != user_id]
        if kept:
            filtered[challenge_id] = kept
    return filtered


def encode_id_set(ids: Iterable[str]) -> list[str]:
    """Encode a set of ids as a deduplicated list, or the sentinel list."""
    unique = unique_ids(ids)
    return unique or [SENTINEL]


def decode_id_set(raw: Any) -> list[str]:
    """Decode a stored id list, dropping sentinel entries."""
    if not isinstance(raw, list) or not all(isinstance(i, str) for i in raw):
        raise MalformedDocumentError("Expected a list of identifiers.")
    return unique_ids(i for i in raw if i != SENTINEL)


def unique_ids(ids: Iterable[str]) -> list[str]:
    """Deduplicate ids, keeping first occurrence order."""
    return list(dict.fromkeys(ids))

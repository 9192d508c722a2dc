"""Common utilities for tests."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query

from muluparty.core.codecs import Completion, encode_ledger, encode_points, format_date
from muluparty.core.store import RemoteStore

WHEN = datetime.datetime(2026, 3, 14, 9, 26, 53)


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where


def make_store() -> tuple[RemoteStore, MockFirestore]:
    """A store backed by a fresh in-memory database."""
    patch_mockfirestore()
    db = MockFirestore()
    return RemoteStore(db), db


def seed_user(db: MockFirestore, user_id: str, teams: Optional[list[str]] = None) -> None:
    db.collection("allUsers").document(user_id).set(
        {"associatedTeams": teams or ["!"]}
    )


def seed_team(
    db: MockFirestore,
    team_id: str,
    participants: dict[str, int],
    name: str = "Team",
    join_code: str = "maple orbit",
    tournament_id: Optional[str] = None,
    ledger: Optional[dict[str, list[Completion]]] = None,
    additional_points: int = 0,
) -> None:
    db.collection("allTeams").document(team_id).set(
        {
            "name": name,
            "joinCode": join_code,
            "participantIdentifiers": encode_points(participants),
            "completedChallenges": encode_ledger(ledger or {}),
            "associatedTournament": tournament_id or "!",
            "additionalPoints": additional_points,
        }
    )


def seed_tournament(
    db: MockFirestore, tournament_id: str, team_ids: list[str], name: str = "Cup"
) -> None:
    db.collection("allTournaments").document(tournament_id).set(
        {
            "name": name,
            "startDate": format_date(datetime.datetime(2026, 1, 1)),
            "endDate": format_date(datetime.datetime(2026, 1, 31)),
            "teamIdentifiers": team_ids or ["!"],
        }
    )


def seed_challenge(
    db: MockFirestore, challenge_id: str, point_value: int = 10, title: str = "Sunrise"
) -> None:
    db.collection("allChallenges").document(challenge_id).set(
        {
            "title": title,
            "prompt": "Photograph the sunrise together.",
            "datePosted": format_date(WHEN),
            "pointValue": point_value,
            "media": "!",
        }
    )


def document(db: MockFirestore, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
    """Raw stored data of a document, or None if it does not exist."""
    snapshot = db.collection(collection).document(doc_id).get()
    return snapshot.to_dict() if snapshot.exists else None

"""Service layer for challenge documents."""

from __future__ import annotations

import datetime
import logging
from functools import partial

from muluparty.core.constants import CHALLENGES_COLLECTION
from muluparty.core.fanout import fan_out
from muluparty.core.store import RemoteStore, get_store
from muluparty.errors import AppError, NotFoundError, ValidationError

from .models import Challenge, ChallengeMedia
from .serializers import deserialize_challenge, serialize_challenge


class ChallengeService:
    """Reads and creates challenges."""

    @staticmethod
    def load_challenge(store: RemoteStore, challenge_id: str) -> Challenge:
        """Fetch and deserialize one challenge, raising on failure."""
        data = store.get(f"{CHALLENGES_COLLECTION}/{challenge_id}")
        if data is None:
            raise NotFoundError(
                f'No Challenge exists with the identifier "{challenge_id}".'
            )
        return deserialize_challenge(challenge_id, data)

    @staticmethod
    def create_challenge(
        title: str,
        prompt: str,
        point_value: int,
        media: ChallengeMedia | None = None,
        date_posted: datetime.datetime | None = None,
        store: RemoteStore | None = None,
    ) -> tuple[str | None, str | None]:
        """Create a challenge. Returns its id or an error, never both."""
        if store is None:
            store = get_store()
        try:
            if point_value < 0:
                raise ValidationError("A Challenge cannot be worth negative points.")
            key = store.generate_key(CHALLENGES_COLLECTION)
            challenge = Challenge(
                id=key,
                title=title,
                prompt=prompt,
                date_posted=date_posted or datetime.datetime.now(),
                point_value=point_value,
                media=media,
            )
            store.set(f"{CHALLENGES_COLLECTION}/{key}", dict(serialize_challenge(challenge)))
            return key, None
        except AppError as e:
            logging.error(f"Error creating challenge: {e.message}")
            return None, e.message

    @staticmethod
    def get_challenge(
        challenge_id: str, store: RemoteStore | None = None
    ) -> tuple[Challenge | None, str | None]:
        """Get one challenge. Returns the challenge or an error, never both."""
        if store is None:
            store = get_store()
        try:
            return ChallengeService.load_challenge(store, challenge_id), None
        except AppError as e:
            return None, e.message

    @staticmethod
    def get_challenges(
        challenge_ids: list[str], store: RemoteStore | None = None
    ) -> tuple[list[Challenge] | None, list[str] | None]:
        """Get several challenges concurrently. Both values may be set."""
        if not challenge_ids:
            return None, ["No identifiers passed!"]
        if store is None:
            store = get_store()
        outcome = fan_out(
            [partial(ChallengeService.load_challenge, store, cid) for cid in challenge_ids]
        )
        return outcome.results or None, outcome.errors or None

"""Service layer for user documents and their team memberships."""

from __future__ import annotations

import logging
from functools import partial

from muluparty.core.constants import USER_ASSOCIATED_TEAMS, USERS_COLLECTION
from muluparty.core.codecs import encode_id_set, validate_identifier
from muluparty.core.fanout import fan_out
from muluparty.core.store import RemoteStore, get_store
from muluparty.errors import AppError, DuplicateResourceError, NotFoundError

from .models import User
from .serializers import deserialize_user, serialize_user


class UserService:
    """Reads users and maintains the user side of team membership."""

    @staticmethod
    def load_user(store: RemoteStore, user_id: str) -> User:
        """Fetch and deserialize one user, raising on failure."""
        data = store.get(f"{USERS_COLLECTION}/{user_id}")
        if data is None:
            raise NotFoundError(f'No User exists with the identifier "{user_id}".')
        return deserialize_user(user_id, data)

    @staticmethod
    def write_teams(store: RemoteStore, user: User) -> None:
        """Persist a user's membership set."""
        store.update(
            f"{USERS_COLLECTION}/{user.id}",
            {USER_ASSOCIATED_TEAMS: encode_id_set(user.associated_teams)},
        )

    @staticmethod
    def add_team_to_user(store: RemoteStore, user_id: str, team_id: str) -> User:
        """Add a team id to a user's membership set."""
        user = UserService.load_user(store, user_id)
        if team_id not in user.associated_teams:
            user.associated_teams.append(team_id)
        UserService.write_teams(store, user)
        return user

    @staticmethod
    def remove_team_from_user(store: RemoteStore, user_id: str, team_id: str) -> User:
        """Remove a team id from a user's membership set."""
        user = UserService.load_user(store, user_id)
        user.associated_teams = [t for t in user.associated_teams if t != team_id]
        UserService.write_teams(store, user)
        return user

    @staticmethod
    def create_user(
        user_id: str | None = None, store: RemoteStore | None = None
    ) -> tuple[str | None, str | None]:
        """Create a user with no teams. Returns its id or an error, never both."""
        if store is None:
            store = get_store()
        try:
            if user_id is not None:
                validate_identifier(user_id, "User identifier")
            if user_id and store.get(f"{USERS_COLLECTION}/{user_id}") is not None:
                raise DuplicateResourceError(f'User "{user_id}" already exists.')
            key = user_id or store.generate_key(USERS_COLLECTION)
            store.set(f"{USERS_COLLECTION}/{key}", dict(serialize_user(User(id=key))))
            return key, None
        except AppError as e:
            logging.error(f"Error creating user: {e.message}")
            return None, e.message

    @staticmethod
    def get_user(
        user_id: str, store: RemoteStore | None = None
    ) -> tuple[User | None, str | None]:
        """Get one user. Returns the user or an error, never both."""
        if store is None:
            store = get_store()
        try:
            return UserService.load_user(store, user_id), None
        except AppError as e:
            return None, e.message

    @staticmethod
    def get_users(
        user_ids: list[str], store: RemoteStore | None = None
    ) -> tuple[list[User] | None, list[str] | None]:
        """Get several users concurrently. Both values may be set."""
        if not user_ids:
            return None, ["No identifiers passed!"]
        if store is None:
            store = get_store()
        outcome = fan_out([partial(UserService.load_user, store, uid) for uid in user_ids])
        return outcome.results or None, outcome.errors or None

    @staticmethod
    def get_all_users(
        store: RemoteStore | None = None,
    ) -> tuple[list[User] | None, str | None]:
        """Get every user. Both values may be set."""
        if store is None:
            store = get_store()
        try:
            user_ids = list(store.children(USERS_COLLECTION))
        except AppError as e:
            return None, e.message
        if not user_ids:
            return [], None
        users, errors = UserService.get_users(user_ids, store)
        return users, "\n".join(errors) if errors else None

"""Service layer keeping teams, users and tournaments consistent.

A team is linked to its users and to its tournament from both sides: the
team document lists its participants and its tournament, and each user and
tournament document lists the team back. The store has no multi-document
transactions, so every operation here reads the documents involved,
validates, and then issues one independent write per document. If a later
write fails after an earlier one succeeded, the documents are left
inconsistent and nothing rolls the earlier write back; the error is
returned to the caller.

Public methods never raise ``AppError``; they return an error descriptor
(``str | None``), alongside a value where there is one.
"""

from __future__ import annotations

import logging
import random
from functools import partial
from typing import Any

from muluparty.challenge.models import Challenge
from muluparty.challenge.services import ChallengeService
from muluparty.core.codecs import (
    Completion,
    encode_ledger,
    encode_points,
    unique_ids,
    validate_identifier,
    without_user,
)
from muluparty.core.config import get_setting
from muluparty.core.constants import (
    SENTINEL,
    TEAM_ASSOCIATED_TOURNAMENT,
    TEAM_COMPLETED_CHALLENGES,
    TEAM_JOIN_CODE,
    TEAM_PARTICIPANTS,
    TEAMS_COLLECTION,
)
from muluparty.core.fanout import fan_out
from muluparty.core.store import RemoteStore, get_store
from muluparty.errors import (
    AppError,
    DuplicateResourceError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from muluparty.user.models import User
from muluparty.user.services import UserService

from .join_codes import JoinCodeGenerator
from .models import CompletedChallenge, Team, TeamMetadata
from .serializers import deserialize_team, serialize_team


def _team_path(team_id: str) -> str:
    return f"{TEAMS_COLLECTION}/{team_id}"


def _nested_challenge(store: RemoteStore, challenge_id: str) -> Challenge:
    try:
        return ChallengeService.load_challenge(store, challenge_id)
    except AppError as e:
        raise AppError(f"While getting Challenges: {e.message}", e.status_code) from e


def _nested_user(store: RemoteStore, user_id: str) -> User:
    try:
        return UserService.load_user(store, user_id)
    except AppError as e:
        raise AppError(
            f"While getting a User for a Challenge: {e.message}", e.status_code
        ) from e


def _nested_tournament(store: RemoteStore, tournament_id: str) -> Any:
    from muluparty.tournament.services import TournamentService  # noqa: PLC0415

    try:
        return TournamentService.load_tournament(store, tournament_id)
    except AppError as e:
        raise AppError(
            f"While getting the Team's Tournament: {e.message}", e.status_code
        ) from e


class TeamService:
    """Service class for team-related operations."""

    # Reading and writing single documents

    @staticmethod
    def load_team(store: RemoteStore, team_id: str) -> Team:
        """Fetch and validate a team without resolving its references."""
        data = store.get(_team_path(team_id))
        if data is None:
            raise NotFoundError(f'No Team exists with the identifier "{team_id}".')
        return deserialize_team(team_id, data)

    @staticmethod
    def materialize(store: RemoteStore, team_id: str) -> Team:
        """Fetch a team and resolve its challenges, users and tournament.

        All referenced documents are fetched in one fan-out; the team is
        returned only once every lookup has succeeded, and any failed lookup
        fails the whole team.
        """
        team = TeamService.load_team(store, team_id)

        challenge_ids = list(team.ledger)
        user_ids = unique_ids(
            c.user_id for completions in team.ledger.values() for c in completions
        )
        operations: list[Any] = [
            partial(_nested_challenge, store, cid) for cid in challenge_ids
        ]
        operations += [partial(_nested_user, store, uid) for uid in user_ids]
        if team.tournament_id:
            operations.append(partial(_nested_tournament, store, team.tournament_id))

        outcome = fan_out(operations)
        if not outcome.succeeded:
            raise AppError(outcome.error_descriptor)

        challenges = dict(zip(challenge_ids, outcome.results[: len(challenge_ids)]))
        users = dict(
            zip(
                user_ids,
                outcome.results[len(challenge_ids) : len(challenge_ids) + len(user_ids)],
            )
        )
        team.completed_challenges = [
            CompletedChallenge(
                challenge=challenges[challenge_id],
                completions=[(users[c.user_id], c.completed_at) for c in completions],
            )
            for challenge_id, completions in team.ledger.items()
        ]
        if team.tournament_id:
            team.tournament = outcome.results[-1]
        return team

    @staticmethod
    def write_participants(store: RemoteStore, team: Team) -> None:
        """Persist a team's participant map."""
        store.update(
            _team_path(team.id), {TEAM_PARTICIPANTS: encode_points(team.participants)}
        )

    @staticmethod
    def write_ledger(store: RemoteStore, team: Team) -> None:
        """Persist a team's completed-challenge ledger."""
        store.update(
            _team_path(team.id), {TEAM_COMPLETED_CHALLENGES: encode_ledger(team.ledger)}
        )

    @staticmethod
    def write_tournament(store: RemoteStore, team_id: str, tournament_id: str | None) -> None:
        """Persist a team's tournament assignment."""
        store.update(
            _team_path(team_id), {TEAM_ASSOCIATED_TOURNAMENT: tournament_id or SENTINEL}
        )

    # Relationship steps; these raise AppError

    @staticmethod
    def _allocate_join_code(store: RemoteStore) -> str:
        """Draw join codes until one is not used by any existing team."""
        generator = JoinCodeGenerator(get_setting("JOIN_CODE_WORDS_PATH"))
        for _ in range(get_setting("JOIN_CODE_MAX_ATTEMPTS")):
            code = generator.generate()
            if not store.find(TEAMS_COLLECTION, TEAM_JOIN_CODE, code):
                return code
            logging.info(f"Join code '{code}' is taken; drawing another.")
        raise DuplicateResourceError("Unable to allocate a unique join code.")

    @staticmethod
    def _add_user(store: RemoteStore, user_id: str, team_id: str) -> None:
        validate_identifier(user_id, "User identifier")
        team = TeamService.load_team(store, team_id)
        user = UserService.load_user(store, user_id)

        if user_id not in team.participants:
            team.participants[user_id] = 0
        if team_id not in user.associated_teams:
            user.associated_teams.append(team_id)

        TeamService.write_participants(store, team)
        UserService.write_teams(store, user)

    @staticmethod
    def _remove_user(
        store: RemoteStore, user_id: str, team_id: str, is_deleting: bool
    ) -> None:
        team = TeamService.load_team(store, team_id)
        if not is_deleting and not [u for u in team.participants if u != user_id]:
            raise InvariantViolationError(
                "Removing this User would leave the Team with no participants; "
                "delete the Team instead."
            )

        UserService.remove_team_from_user(store, user_id, team_id)

        ledger = without_user(team.ledger, user_id)
        if ledger != team.ledger:
            team.ledger = ledger
            TeamService.write_ledger(store, team)

        team.participants.pop(user_id, None)
        TeamService.write_participants(store, team)

    @staticmethod
    def _attach_team(store: RemoteStore, team_id: str, tournament_id: str) -> str:
        """Point a team at a tournament; the tournament side is left to the caller."""
        team = TeamService.load_team(store, team_id)
        if team.tournament_id is not None:
            raise InvariantViolationError(
                f'Team "{team_id}" is already participating in a Tournament.'
            )
        TeamService.write_tournament(store, team_id, tournament_id)
        return team_id

    @staticmethod
    def _enroll(store: RemoteStore, user_id: str, team_id: str) -> str:
        """Add a user to a team's participants; the user side is left to the caller."""
        validate_identifier(team_id, "Team identifier")
        team = TeamService.load_team(store, team_id)
        if user_id not in team.participants:
            team.participants[user_id] = 0
            TeamService.write_participants(store, team)
        return team_id

    @staticmethod
    def _check_ledger_references(
        store: RemoteStore, ledger: dict[str, list[Completion]]
    ) -> None:
        """Ensure every challenge and user named in a ledger exists."""
        for challenge_id in ledger:
            validate_identifier(challenge_id, "Challenge identifier")
        user_ids = unique_ids(
            c.user_id for completions in ledger.values() for c in completions
        )
        for user_id in user_ids:
            validate_identifier(user_id, "User identifier")

        operations: list[Any] = [
            partial(ChallengeService.load_challenge, store, cid) for cid in ledger
        ]
        operations += [partial(UserService.load_user, store, uid) for uid in user_ids]
        outcome = fan_out(operations)
        if not outcome.succeeded:
            raise AppError(outcome.error_descriptor)

    # Public operations

    @staticmethod
    def create_team(
        name: str, participants: dict[str, int], store: RemoteStore | None = None
    ) -> tuple[TeamMetadata | None, str | None]:
        """Create a team and add each participant to it.

        Returns ``(None, error)`` if the team could not be written. Once it
        has been written the metadata is always returned, together with the
        errors of any participant that could not be added.
        """
        if store is None:
            store = get_store()
        try:
            if not participants:
                raise ValidationError("A Team needs at least one participant.")
            for user_id in participants:
                validate_identifier(user_id, "User identifier")
            join_code = TeamService._allocate_join_code(store)
            key = store.generate_key(TEAMS_COLLECTION)
            team = Team(
                id=key, name=name, join_code=join_code, participants=dict(participants)
            )
            store.set(_team_path(key), dict(serialize_team(team)))
        except AppError as e:
            logging.error(f"Error creating team '{name}': {e.message}")
            return None, e.message

        outcome = fan_out(
            [partial(TeamService._add_user, store, uid, key) for uid in participants]
        )
        if not outcome.succeeded:
            logging.warning(f"Team {key} created with errors: {outcome.errors}")
        return TeamMetadata(identifier=key, join_code=join_code), outcome.error_descriptor

    @staticmethod
    def add_user_to_team(
        user_id: str, team_id: str, store: RemoteStore | None = None
    ) -> str | None:
        """Add a user to a team, writing the team and then the user."""
        if store is None:
            store = get_store()
        try:
            TeamService._add_user(store, user_id, team_id)
            logging.info(f"Added user {user_id} to team {team_id}.")
            return None
        except AppError as e:
            logging.warning(f"Error adding user {user_id} to team {team_id}: {e.message}")
            return e.message

    @staticmethod
    def add_users_to_team(
        user_ids: list[str], team_id: str, store: RemoteStore | None = None
    ) -> str | None:
        """Add several users to a team.

        User documents are updated concurrently; the team document is
        written once afterwards with every user that was added.
        """
        if not user_ids:
            return "No identifiers passed!"
        if store is None:
            store = get_store()
        try:
            for user_id in user_ids:
                validate_identifier(user_id, "User identifier")
            team = TeamService.load_team(store, team_id)
        except AppError as e:
            return e.message

        outcome = fan_out(
            [
                partial(UserService.add_team_to_user, store, uid, team_id)
                for uid in unique_ids(user_ids)
            ]
        )
        errors = list(outcome.errors)
        if outcome.results:
            for user in outcome.results:
                team.participants.setdefault(user.id, 0)
            try:
                TeamService.write_participants(store, team)
            except AppError as e:
                errors.append(e.message)
        return "\n".join(errors) if errors else None

    @staticmethod
    def add_user_to_teams(
        user_id: str, team_ids: list[str], store: RemoteStore | None = None
    ) -> str | None:
        """Add a user to several teams.

        Team documents are updated concurrently; the user document is
        written once afterwards with every team the user joined.
        """
        if not team_ids:
            return "No identifiers passed!"
        if store is None:
            store = get_store()
        try:
            validate_identifier(user_id, "User identifier")
            user = UserService.load_user(store, user_id)
        except AppError as e:
            return e.message

        outcome = fan_out(
            [
                partial(TeamService._enroll, store, user_id, tid)
                for tid in unique_ids(team_ids)
            ]
        )
        errors = list(outcome.errors)
        if outcome.results:
            user.associated_teams = unique_ids([*user.associated_teams, *outcome.results])
            try:
                UserService.write_teams(store, user)
            except AppError as e:
                errors.append(e.message)
        return "\n".join(errors) if errors else None

    @staticmethod
    def remove_user_from_team(
        user_id: str,
        team_id: str,
        is_deleting: bool = False,
        store: RemoteStore | None = None,
    ) -> str | None:
        """Remove a user from a team, its ledger, and the user's team list.

        Unless the team is being deleted, removing its last participant is
        rejected before anything is written.
        """
        if store is None:
            store = get_store()
        try:
            TeamService._remove_user(store, user_id, team_id, is_deleting)
            logging.info(f"Removed user {user_id} from team {team_id}.")
            return None
        except AppError as e:
            logging.warning(
                f"Error removing user {user_id} from team {team_id}: {e.message}"
            )
            return e.message

    @staticmethod
    def add_team_to_tournament(
        team_id: str, tournament_id: str, store: RemoteStore | None = None
    ) -> str | None:
        """Assign a team to a tournament, writing the team and then the tournament.

        A team already assigned to a tournament must be detached first.
        """
        from muluparty.tournament.services import TournamentService  # noqa: PLC0415

        if store is None:
            store = get_store()
        try:
            tournament = TournamentService.load_tournament(store, tournament_id)
            TeamService._attach_team(store, team_id, tournament_id)
            tournament.team_ids = unique_ids([*tournament.team_ids, team_id])
            TournamentService.write_teams(store, tournament)
            return None
        except AppError as e:
            logging.warning(
                f"Error adding team {team_id} to tournament {tournament_id}: {e.message}"
            )
            return e.message

    @staticmethod
    def add_teams_to_tournament(
        team_ids: list[str], tournament_id: str, store: RemoteStore | None = None
    ) -> str | None:
        """Assign several teams to a tournament.

        Team documents are updated concurrently; the tournament is written
        once afterwards with every team that was attached. Failures are
        returned together, one per line.
        """
        from muluparty.tournament.services import TournamentService  # noqa: PLC0415

        if not team_ids:
            return "No identifiers passed!"
        if store is None:
            store = get_store()
        try:
            tournament = TournamentService.load_tournament(store, tournament_id)
        except AppError as e:
            return e.message

        outcome = fan_out(
            [
                partial(TeamService._attach_team, store, tid, tournament_id)
                for tid in unique_ids(team_ids)
            ]
        )
        errors = list(outcome.errors)
        if outcome.results:
            tournament.team_ids = unique_ids([*tournament.team_ids, *outcome.results])
            try:
                TournamentService.write_teams(store, tournament)
            except AppError as e:
                errors.append(e.message)
        return "\n".join(errors) if errors else None

    @staticmethod
    def delete_team(team_id: str, store: RemoteStore | None = None) -> str | None:
        """Detach a team from its tournament and users, then delete it.

        Fails without writing anything if the team is the last one in its
        tournament. If removing a participant fails, the team document is
        kept and the error returned.
        """
        from muluparty.tournament.services import TournamentService  # noqa: PLC0415

        if store is None:
            store = get_store()
        try:
            team = TeamService.load_team(store, team_id)
            if team.tournament_id:
                tournament = TournamentService.load_tournament(store, team.tournament_id)
                if team_id in tournament.team_ids:
                    if tournament.team_ids == [team_id]:
                        raise InvariantViolationError(
                            "Deleting this Team would leave its associated Tournament "
                            "with no participating Teams. Delete the Tournament first."
                        )
                    TournamentService.detach_team(store, team_id, tournament.id)
                else:
                    logging.warning(
                        f"Team {team_id} points at tournament {tournament.id}, "
                        "which does not list it."
                    )

            outcome = fan_out(
                [
                    partial(TeamService._remove_user, store, uid, team_id, True)
                    for uid in team.participants
                ]
            )
            if not outcome.succeeded:
                raise AppError(outcome.error_descriptor)

            store.delete(_team_path(team_id))
            logging.info(f"Deleted team {team_id}.")
            return None
        except AppError as e:
            logging.error(f"Error deleting team {team_id}: {e.message}")
            return e.message

    @staticmethod
    def add_completed_challenges(
        ledger: dict[str, list[Completion]],
        team_id: str,
        overwrite: bool = False,
        store: RemoteStore | None = None,
    ) -> str | None:
        """Record challenge completions on a team.

        With ``overwrite`` the team's ledger is replaced; otherwise the new
        completions are merged into it. Every referenced challenge and user
        must exist, or nothing is written.
        """
        if store is None:
            store = get_store()
        try:
            team = TeamService.load_team(store, team_id)
            TeamService._check_ledger_references(store, ledger)
            if overwrite:
                team.ledger = {cid: list(c) for cid, c in ledger.items() if c}
            else:
                for challenge_id, completions in ledger.items():
                    existing = team.ledger.setdefault(challenge_id, [])
                    existing.extend(c for c in completions if c not in existing)
                team.ledger = {cid: c for cid, c in team.ledger.items() if c}
            TeamService.write_ledger(store, team)
            return None
        except AppError as e:
            logging.warning(f"Error adding completions to team {team_id}: {e.message}")
            return e.message

    @staticmethod
    def get_team(
        team_id: str, store: RemoteStore | None = None
    ) -> tuple[Team | None, str | None]:
        """Get a fully resolved team. Returns the team or an error, never both."""
        if store is None:
            store = get_store()
        try:
            return TeamService.materialize(store, team_id), None
        except AppError as e:
            return None, e.message

    @staticmethod
    def get_teams(
        team_ids: list[str], store: RemoteStore | None = None
    ) -> tuple[list[Team] | None, list[str] | None]:
        """Get several resolved teams concurrently. Both values may be set."""
        if not team_ids:
            return None, ["No identifiers passed!"]
        if store is None:
            store = get_store()
        outcome = fan_out([partial(TeamService.materialize, store, tid) for tid in team_ids])
        return outcome.results or None, outcome.errors or None

    @staticmethod
    def get_all_teams(
        store: RemoteStore | None = None,
    ) -> tuple[list[Team] | None, str | None]:
        """Get every team. Both values may be set."""
        if store is None:
            store = get_store()
        try:
            team_ids = list(store.children(TEAMS_COLLECTION))
        except AppError as e:
            return None, e.message
        if not team_ids:
            return [], None
        teams, errors = TeamService.get_teams(team_ids, store)
        return teams, "\n".join(errors) if errors else None

    @staticmethod
    def get_random_teams(
        amount: int | None = None, store: RemoteStore | None = None
    ) -> tuple[list[str] | None, str | None]:
        """Get team ids in random order, at most ``amount`` of them.

        Asking for more teams than exist returns all of them along with a
        notice, so both values may be set.
        """
        if amount is not None and amount < 0:
            return None, "The requested amount cannot be negative."
        if store is None:
            store = get_store()
        try:
            team_ids = list(store.children(TEAMS_COLLECTION))
        except AppError as e:
            return None, e.message

        shuffled = random.sample(team_ids, len(team_ids))  # nosec
        if amount is None:
            return shuffled, None
        if amount > len(shuffled):
            return shuffled, "Requested amount was larger than database size."
        return shuffled[:amount], None

    @staticmethod
    def get_team_by_join_code(
        join_code: str, store: RemoteStore | None = None
    ) -> tuple[str | None, str | None]:
        """Find the id of the team with a join code."""
        if store is None:
            store = get_store()
        code = " ".join(join_code.split()).lower()
        try:
            matches = store.find(TEAMS_COLLECTION, TEAM_JOIN_CODE, code)
        except AppError as e:
            return None, e.message
        if not matches:
            return None, f"No Team exists with join code {code}."
        if len(matches) > 1:
            logging.warning(f"Join code '{code}' is shared by teams {matches}.")
        return matches[0], None

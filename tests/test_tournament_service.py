"""Tests for TournamentService."""

from __future__ import annotations

import datetime
import unittest
from unittest.mock import patch

from muluparty.tournament.models import Tournament
from muluparty.tournament.services import TournamentService
from tests.conftest import document, make_store, seed_team, seed_tournament, seed_user

START = datetime.datetime(2026, 5, 1)
END = datetime.datetime(2026, 5, 31)


class TestCreateTournament(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.db = make_store()
        seed_user(self.db, "u1", ["t1", "t2"])
        seed_team(self.db, "t1", {"u1": 0})
        seed_team(self.db, "t2", {"u1": 0})

    def test_create_assigns_every_team(self) -> None:
        tournament_id, error = TournamentService.create_tournament(
            "Spring Cup", START, END, ["t1", "t2"], self.store
        )

        self.assertIsNone(error)
        assert tournament_id is not None
        stored = document(self.db, "allTournaments", tournament_id)
        assert stored is not None
        self.assertEqual(stored["name"], "Spring Cup")
        self.assertEqual(stored["startDate"], "2026-05-01 00:00:00")
        self.assertEqual(stored["teamIdentifiers"], ["t1", "t2"])
        for team_id in ("t1", "t2"):
            team = document(self.db, "allTeams", team_id)
            assert team is not None
            self.assertEqual(team["associatedTournament"], tournament_id)

    def test_create_requires_teams(self) -> None:
        tournament_id, error = TournamentService.create_tournament(
            "Spring Cup", START, END, [], self.store
        )
        self.assertIsNone(tournament_id)
        self.assertEqual(error, "A Tournament needs at least one Team.")
        self.assertEqual(list(self.store.children("allTournaments")), [])

    def test_create_rejects_inverted_dates(self) -> None:
        tournament_id, error = TournamentService.create_tournament(
            "Spring Cup", END, START, ["t1"], self.store
        )
        self.assertIsNone(tournament_id)
        self.assertIn("cannot end before it starts", error or "")

    def test_create_reports_assigned_team(self) -> None:
        seed_tournament(self.db, "cup", ["t1"])
        seed_team(self.db, "t1", {"u1": 0}, tournament_id="cup")

        tournament_id, error = TournamentService.create_tournament(
            "Spring Cup", START, END, ["t1"], self.store
        )

        self.assertIsNone(tournament_id)
        self.assertIn("already participating in a Tournament", error or "")
        team = document(self.db, "allTeams", "t1")
        assert team is not None
        self.assertEqual(team["associatedTournament"], "cup")


class TestTournamentTeams(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.db = make_store()
        seed_user(self.db, "u1", ["t1", "t2"])
        seed_team(self.db, "t1", {"u1": 1}, tournament_id="cup", additional_points=5)
        seed_team(self.db, "t2", {"u1": 0}, tournament_id="cup", additional_points=9)
        seed_tournament(self.db, "cup", ["t1", "t2"])

    def test_remove_team(self) -> None:
        error = TournamentService.remove_team_from_tournament("t1", "cup", store=self.store)

        self.assertIsNone(error)
        tournament = document(self.db, "allTournaments", "cup")
        team = document(self.db, "allTeams", "t1")
        assert tournament is not None and team is not None
        self.assertEqual(tournament["teamIdentifiers"], ["t2"])
        self.assertEqual(team["associatedTournament"], "!")

    def test_removing_last_team_is_rejected(self) -> None:
        self.assertIsNone(
            TournamentService.remove_team_from_tournament("t1", "cup", store=self.store)
        )
        before = document(self.db, "allTournaments", "cup")

        error = TournamentService.remove_team_from_tournament("t2", "cup", store=self.store)

        self.assertIn("no participating Teams", error or "")
        self.assertEqual(document(self.db, "allTournaments", "cup"), before)

    def test_removing_last_team_while_deleting(self) -> None:
        seed_tournament(self.db, "solo", ["t1"])
        seed_team(self.db, "t1", {"u1": 0}, tournament_id="solo")

        error = TournamentService.remove_team_from_tournament(
            "t1", "solo", is_deleting=True, store=self.store
        )

        self.assertIsNone(error)
        tournament = document(self.db, "allTournaments", "solo")
        assert tournament is not None
        self.assertEqual(tournament["teamIdentifiers"], ["!"])

    def test_get_teams_is_cached(self) -> None:
        tournament, _ = TournamentService.get_tournament("cup", self.store)
        assert tournament is not None

        teams, error = TournamentService.get_teams(tournament, self.store)
        self.assertIsNone(error)
        assert teams is not None
        self.assertEqual([team.id for team in teams], ["t1", "t2"])

        with patch.object(self.store, "get", wraps=self.store.get) as get:
            again, _ = TournamentService.get_teams(tournament, self.store)
        get.assert_not_called()
        self.assertIs(again, teams)

    def test_get_teams_partial_failure_returns_nothing(self) -> None:
        tournament = Tournament(
            id="cup", name="Cup", start_date=START, end_date=END, team_ids=["t1", "t9"]
        )

        teams, error = TournamentService.get_teams(tournament, self.store)

        self.assertIsNone(teams)
        self.assertEqual(error, 'No Team exists with the identifier "t9".')
        self.assertIsNone(tournament.teams)

    def test_leaderboard_orders_by_points(self) -> None:
        tournament, _ = TournamentService.get_tournament("cup", self.store)
        assert tournament is not None
        TournamentService.get_teams(tournament, self.store)

        standings = tournament.leaderboard()

        assert standings is not None
        self.assertEqual([(team.id, points) for team, points in standings], [("t2", 9), ("t1", 6)])

    def test_leaderboard_needs_loaded_teams(self) -> None:
        tournament = Tournament(id="x", name="X", start_date=START, end_date=END)
        self.assertIsNone(tournament.leaderboard())

    def test_delete_tournament_releases_teams(self) -> None:
        self.assertIsNone(TournamentService.delete_tournament("cup", self.store))

        self.assertIsNone(document(self.db, "allTournaments", "cup"))
        for team_id in ("t1", "t2"):
            team = document(self.db, "allTeams", team_id)
            assert team is not None
            self.assertEqual(team["associatedTournament"], "!")

    def test_delete_missing_tournament(self) -> None:
        self.assertEqual(
            TournamentService.delete_tournament("gone", self.store),
            'No Tournament exists with the identifier "gone".',
        )


class TestGetTournaments(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.db = make_store()
        seed_tournament(self.db, "cup", ["t1"], name="Cup")
        seed_tournament(self.db, "open", ["t2"], name="Open")

    def test_get_all_tournaments(self) -> None:
        tournaments, error = TournamentService.get_all_tournaments(self.store)
        self.assertIsNone(error)
        assert tournaments is not None
        self.assertEqual(sorted(t.name for t in tournaments), ["Cup", "Open"])

    def test_get_tournaments_requires_ids(self) -> None:
        self.assertEqual(
            TournamentService.get_tournaments([], self.store),
            (None, ["No identifiers passed!"]),
        )

    def test_corrupted_team_list(self) -> None:
        self.db.collection("allTournaments").document("cup").update(
            {"teamIdentifiers": "t1"}
        )
        tournament, error = TournamentService.get_tournament("cup", self.store)
        self.assertIsNone(tournament)
        self.assertEqual(error, "This Tournament has corrupted 'teamIdentifiers'.")


if __name__ == "__main__":
    unittest.main()

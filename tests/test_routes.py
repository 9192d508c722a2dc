"""Tests for the JSON routes using mockfirestore."""

from __future__ import annotations

import re
import unittest
from unittest.mock import patch

from mockfirestore import MockFirestore

from muluparty import create_app
from tests.conftest import document, patch_mockfirestore, seed_user

patch_mockfirestore()


class RoutesTestCase(unittest.TestCase):
    """Drives a team and a tournament through their lifecycle over HTTP."""

    def setUp(self) -> None:
        self.db = MockFirestore()
        patcher = patch("firebase_admin.firestore.client", return_value=self.db)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.client = self.app.test_client()

        for user_id in ("u1", "u2", "u3"):
            seed_user(self.db, user_id)

    def _create_team(self, name: str = "Alpha") -> dict:
        response = self.client.post(
            "/teams/", json={"name": name, "participants": ["u1", "u2"]}
        )
        self.assertEqual(response.status_code, 201)
        return response.get_json()["data"]

    def test_create_user(self) -> None:
        response = self.client.post("/users/", json={"user_id": "auth-9"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(
            response.get_json(),
            {"success": True, "message": "User created.", "data": {"id": "auth-9"}},
        )

        response = self.client.get("/users/auth-9")
        self.assertEqual(response.get_json()["data"], {"id": "auth-9", "teamIds": []})

    def test_create_user_with_delimiter_in_id(self) -> None:
        response = self.client.post("/users/", json={"user_id": "a – b"})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertIn("cannot contain '–'", body["message"])
        self.assertIsNone(document(self.db, "allUsers", "a – b"))

    def test_create_team_with_reserved_participant(self) -> None:
        response = self.client.post(
            "/teams/", json={"name": "Alpha", "participants": ["u1", "!"]}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("reserved", response.get_json()["message"])

    def test_join_several_teams(self) -> None:
        first = self._create_team("Alpha")
        second = self._create_team("Beta")

        response = self.client.post(
            "/teams/users/u3", json={"team_ids": [first["id"], second["id"]]}
        )
        self.assertEqual(response.status_code, 200)
        user = document(self.db, "allUsers", "u3")
        assert user is not None
        self.assertEqual(sorted(user["associatedTeams"]), sorted([first["id"], second["id"]]))

        response = self.client.post("/teams/users/u3", json={"team_ids": ["a/b"]})
        self.assertEqual(response.status_code, 400)

    def test_random_teams(self) -> None:
        created = self._create_team()

        response = self.client.get("/teams/random?amount=3")
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["message"], "Requested amount was larger than database size.")
        self.assertEqual(body["data"], {"teamIds": [created["id"]]})

        response = self.client.get("/teams/random?amount=-1")
        self.assertEqual(response.status_code, 400)

    def test_missing_user(self) -> None:
        response = self.client.get("/users/ghost")
        self.assertEqual(response.status_code, 404)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertIsNone(body["data"])

    def test_create_and_view_team(self) -> None:
        created = self._create_team()
        self.assertRegex(created["joinCode"], re.compile(r"^[a-z]+ [a-z]+$"))

        response = self.client.get(f"/teams/{created['id']}")
        self.assertEqual(response.status_code, 200)
        team = response.get_json()["data"]
        self.assertEqual(team["name"], "Alpha")
        self.assertEqual(team["participants"], {"u1": 0, "u2": 0})
        self.assertIsNone(team["tournamentId"])
        self.assertEqual(team["totalPoints"], 0)

    def test_create_team_validation(self) -> None:
        response = self.client.post("/teams/", json={"participants": ["u1"]})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertIn("name", body["message"])

    def test_join_and_leave_team(self) -> None:
        created = self._create_team()

        response = self.client.post(
            "/teams/join",
            json={"join_code": created["joinCode"].upper(), "user_id": "u3"},
        )
        self.assertEqual(response.status_code, 200)
        user = document(self.db, "allUsers", "u3")
        assert user is not None
        self.assertEqual(user["associatedTeams"], [created["id"]])

        response = self.client.delete(f"/teams/{created['id']}/users/u3")
        self.assertEqual(response.status_code, 200)
        user = document(self.db, "allUsers", "u3")
        assert user is not None
        self.assertEqual(user["associatedTeams"], ["!"])

    def test_unknown_join_code(self) -> None:
        response = self.client.post(
            "/teams/join", json={"join_code": "nothing here", "user_id": "u3"}
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.get_json()["message"], "No Team exists with join code nothing here."
        )

    def test_tournament_lifecycle(self) -> None:
        team = self._create_team()

        response = self.client.post(
            "/tournaments/",
            json={
                "name": "Spring Cup",
                "start_date": "2026-05-01",
                "end_date": "2026-05-31",
                "team_ids": [team["id"]],
            },
        )
        self.assertEqual(response.status_code, 201)
        tournament_id = response.get_json()["data"]["id"]

        response = self.client.get(f"/tournaments/{tournament_id}/leaderboard")
        self.assertEqual(response.status_code, 200)
        board = response.get_json()["data"]["leaderboard"]
        self.assertEqual(board, [{"teamId": team["id"], "name": "Alpha", "points": 0}])

        response = self.client.delete(f"/teams/{team['id']}")
        self.assertEqual(response.status_code, 400)
        self.assertIn("Delete the Tournament first", response.get_json()["message"])

        response = self.client.delete(f"/tournaments/{tournament_id}")
        self.assertEqual(response.status_code, 200)
        response = self.client.delete(f"/teams/{team['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(document(self.db, "allTeams", team["id"]))

    def test_tournament_dates_validated(self) -> None:
        team = self._create_team()
        response = self.client.post(
            "/tournaments/",
            json={
                "name": "Backwards",
                "start_date": "2026-05-31",
                "end_date": "2026-05-01",
                "team_ids": [team["id"]],
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("end_date", response.get_json()["message"])

    def test_add_and_remove_tournament_teams(self) -> None:
        first = self._create_team("Alpha")
        second = self._create_team("Beta")
        response = self.client.post(
            "/tournaments/",
            json={
                "name": "Spring Cup",
                "start_date": "2026-05-01",
                "end_date": "2026-05-31",
                "team_ids": [first["id"]],
            },
        )
        tournament_id = response.get_json()["data"]["id"]

        response = self.client.post(
            f"/tournaments/{tournament_id}/teams", json={"team_ids": [second["id"]]}
        )
        self.assertEqual(response.status_code, 200)

        response = self.client.delete(f"/tournaments/{tournament_id}/teams/{first['id']}")
        self.assertEqual(response.status_code, 200)

        response = self.client.get(f"/tournaments/{tournament_id}")
        self.assertEqual(response.get_json()["data"]["teamIds"], [second["id"]])

    def test_unknown_route(self) -> None:
        response = self.client.get("/nowhere")
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.get_json()["success"])


if __name__ == "__main__":
    unittest.main()

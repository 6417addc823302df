import unittest

from fastapi.testclient import TestClient

from movie_master_api.app.core.db import WATCHLIST_COLLECTION
from stubs import auth, make_app


class TestWatchlistApi(unittest.TestCase):
    def setUp(self) -> None:
        app, self.factory, _ = make_app()
        self.entries = self.factory.database[WATCHLIST_COLLECTION]
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def _insert(self, body: dict, token: str = "token-user1"):
        return self.client.post("/api/watchListInsert", json=body, headers=auth(token))

    def test_insert_stamps_owner_from_token(self) -> None:
        res = self._insert({"movieId": "abc123", "title": "Dune", "addedBy": "someone-else"})

        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["addedBy"], "user1")
        self.assertEqual(body["movieId"], "abc123")
        self.assertEqual(body["title"], "Dune")
        self.assertIn("id", body)
        self.assertIn("createdAt", body)
        self.assertEqual(self.entries.documents[0]["addedBy"], "user1")

    def test_duplicate_insert_returns_existing_entry(self) -> None:
        first = self._insert({"movieId": "abc123", "note": "first"}).json()

        res = self._insert({"movieId": "abc123", "note": "second"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["id"], first["id"])
        self.assertEqual(res.json()["note"], "first")
        self.assertEqual(len(self.entries.documents), 1)

    def test_same_movie_for_two_users_is_two_entries(self) -> None:
        self._insert({"movieId": "abc123"}, token="token-user1")
        self._insert({"movieId": "abc123"}, token="token-user2")
        self.assertEqual(len(self.entries.documents), 2)

    def test_numeric_movie_id_is_stored_as_string(self) -> None:
        res = self._insert({"movieId": 42})
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.json()["movieId"], "42")

    def test_insert_without_movie_id_is_bad_request(self) -> None:
        res = self._insert({"title": "Dune"})
        self.assertEqual(res.status_code, 400)
        self.assertTrue(res.json()["message"].startswith("Invalid watchlist entry"))
        self.assertEqual(self.entries.documents, [])

    def test_list_returns_only_own_entries(self) -> None:
        self._insert({"movieId": "m1"}, token="token-user1")
        self._insert({"movieId": "m2"}, token="token-user1")
        self._insert({"movieId": "m3"}, token="token-user2")

        res = self.client.get("/api/myWatchList/user1", headers=auth("token-user1"))

        self.assertEqual(res.status_code, 200)
        self.assertEqual(sorted(e["movieId"] for e in res.json()), ["m1", "m2"])

    def test_empty_watchlist_is_empty_list(self) -> None:
        res = self.client.get("/api/myWatchList/user1", headers=auth("token-user1"))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), [])

    def test_other_owner_is_forbidden_whether_or_not_data_exists(self) -> None:
        self._insert({"movieId": "m1"}, token="token-user2")
        for owner in ("user2", "nobody"):
            with self.subTest(owner=owner):
                for method, path in (
                    ("get", f"/api/myWatchList/{owner}"),
                    ("delete", f"/api/watchListDelete/{owner}/m1"),
                    ("get", f"/api/watchlist/check/{owner}/m1"),
                ):
                    res = self.client.request(method.upper(), path, headers=auth("token-user1"))
                    self.assertEqual(res.status_code, 403, path)
                    self.assertEqual(res.json(), {"message": "Forbidden"})
        self.assertEqual(len(self.entries.documents), 1)

    def test_watchlist_routes_require_a_token(self) -> None:
        self.assertEqual(self.client.post("/api/watchListInsert", json={"movieId": "m1"}).status_code, 401)
        self.assertEqual(self.client.get("/api/myWatchList/user1").status_code, 401)
        self.assertEqual(self.client.delete("/api/watchListDelete/user1/m1").status_code, 401)
        self.assertEqual(self.client.get("/api/watchlist/check/user1/m1").status_code, 401)

    def test_check_membership(self) -> None:
        res = self.client.get("/api/watchlist/check/user1/abc123", headers=auth("token-user1"))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"inWatchlist": False})

        self._insert({"movieId": "abc123"})

        res = self.client.get("/api/watchlist/check/user1/abc123", headers=auth("token-user1"))
        self.assertEqual(res.json(), {"inWatchlist": True})

    def test_delete_entry(self) -> None:
        self._insert({"movieId": "abc123"})

        res = self.client.delete("/api/watchListDelete/user1/abc123", headers=auth("token-user1"))

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"success": True, "message": "Removed from watchlist"})
        res = self.client.get("/api/watchlist/check/user1/abc123", headers=auth("token-user1"))
        self.assertEqual(res.json(), {"inWatchlist": False})

    def test_delete_missing_entry_is_not_found(self) -> None:
        res = self.client.delete("/api/watchListDelete/user1/abc123", headers=auth("token-user1"))
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["message"], "Not found")
        self.assertFalse(res.json()["success"])


if __name__ == "__main__":
    unittest.main()

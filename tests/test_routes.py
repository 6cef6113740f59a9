import random
import unittest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from main import app
from creator_analytics.services.storage_service import ObjectStorage
from creator_analytics.utils import dependencies as deps
from creator_analytics.utils.auth import create_access_token
from fakes import (
    FakeAnalyticsStore, FakeCreator, FakeCreatorStore, FakeUser, FakeUserStore, make_record,
)


class RouteTestCase(unittest.TestCase):

    def setUp(self):
        env = patch.dict("os.environ", {"JWT_SECRET": "route-secret"})
        env.start()
        self.addCleanup(env.stop)

        self.owner = FakeUser(name="Owner", email="owner@test.com")
        self.other = FakeUser(name="Other", email="other@test.com")
        self.admin = FakeUser(name="Admin", email="admin@test.com", role="admin")
        self.users = FakeUserStore([self.owner, self.other, self.admin])

        self.creator = FakeCreator(user_id=self.owner.id, name="Ada", platform="Instagram", username="ada")
        self.foreign = FakeCreator(user_id=self.other.id, name="Bob", platform="YouTube", username="bob")
        self.creators = FakeCreatorStore([self.creator, self.foreign])
        self.analytics = FakeAnalyticsStore([make_record(self.foreign, 40000, 5.0)])

        self.storage_client = MagicMock()
        self.storage = ObjectStorage(bucket="bucket", region="us-east-1", client=self.storage_client)

        app.dependency_overrides[deps.ensure_db] = lambda: None
        app.dependency_overrides[deps.get_user_store] = lambda: self.users
        app.dependency_overrides[deps.get_creator_store] = lambda: self.creators
        app.dependency_overrides[deps.get_analytics_store] = lambda: self.analytics
        app.dependency_overrides[deps.get_rng] = lambda: random.Random(0)
        app.dependency_overrides[deps.get_object_storage] = lambda: self.storage
        self.addCleanup(app.dependency_overrides.clear)

        self.client = TestClient(app)

    def auth(self, user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}


class TestAuthRoutes(RouteTestCase):

    def test_requires_token(self):
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)
        res = self.client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
        self.assertEqual(res.status_code, 401)

    def test_register_login_me(self):
        res = self.client.post("/api/auth/register", json={
            "name": "New", "email": "new@test.com", "password": "secret123",
        })
        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["user"]["email"], "new@test.com")
        self.assertEqual(body["user"]["_id"], body["user"]["id"])
        self.assertNotIn("passwordHash", body["user"])

        me = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
        self.assertEqual(me.json()["user"]["name"], "New")

        login = self.client.post("/api/auth/login", json={"email": "new@test.com", "password": "secret123"})
        self.assertEqual(login.status_code, 200)

        bad = self.client.post("/api/auth/login", json={"email": "new@test.com", "password": "wrong!!"})
        self.assertEqual(bad.status_code, 401)
        self.assertEqual(bad.json(), {"detail": "Invalid email or password"})

    def test_register_errors(self):
        res = self.client.post("/api/auth/register", json={"name": "X", "email": "bad", "password": "secret123"})
        self.assertEqual(res.status_code, 400)
        dup = self.client.post("/api/auth/register", json={
            "name": "Again", "email": "owner@test.com", "password": "secret123",
        })
        self.assertEqual(dup.status_code, 409)

    def test_disabled_account(self):
        self.owner.disabled = True
        res = self.client.get("/api/auth/me", headers=self.auth(self.owner))
        self.assertEqual(res.status_code, 403)


class TestAnalyticsRoutes(RouteTestCase):

    def test_refresh_or_create_flow(self):
        url = f"/api/analytics/creator/{self.creator.id}"
        self.assertEqual(self.client.get(url, headers=self.auth(self.owner)).json(), {"analytics": None})

        first = self.client.post(f"/api/analytics/refresh/{self.creator.id}", headers=self.auth(self.owner))
        self.assertEqual(first.status_code, 200)
        analytics = first.json()["analytics"]
        self.assertEqual(len(analytics["historical"]), 1)
        self.assertEqual(analytics["creator"]["username"], "ada")

        second = self.client.post(f"/api/analytics/refresh/{self.creator.id}", headers=self.auth(self.owner))
        self.assertEqual(len(second.json()["analytics"]["historical"]), 2)

        current = self.client.get(url, headers=self.auth(self.owner)).json()["analytics"]
        self.assertEqual(current["followers"], second.json()["analytics"]["followers"])

    def test_refresh_authorization(self):
        res = self.client.post(f"/api/analytics/refresh/{self.creator.id}", headers=self.auth(self.other))
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.json(), {"detail": "Forbidden"})

        res = self.client.post(f"/api/analytics/refresh/{self.creator.id}", headers=self.auth(self.admin))
        self.assertEqual(res.status_code, 200)

    def test_unknown_creator(self):
        res = self.client.post("/api/analytics/refresh/000000000000000000000000", headers=self.auth(self.owner))
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json(), {"detail": "Creator not found"})

    def test_dashboard(self):
        mine = self.client.get("/api/analytics/dashboard", headers=self.auth(self.owner)).json()
        self.assertEqual(mine["totalCreators"], 1)
        self.assertEqual(mine["totalFollowers"], 0)
        self.assertEqual(len(mine["followersGrowth"]), 7)

        everything = self.client.get(
            "/api/analytics/dashboard", params={"timeframe": "day"}, headers=self.auth(self.admin),
        ).json()
        self.assertEqual(everything["totalCreators"], 2)
        self.assertEqual(everything["totalFollowers"], 40000)
        self.assertEqual(everything["topCreators"][0]["name"], "Bob")
        self.assertEqual(len(everything["engagementHistory"]), 24)

        other = self.client.get(
            "/api/analytics/dashboard", params={"timeframe": "quarter"}, headers=self.auth(self.owner),
        )
        self.assertEqual(other.status_code, 200)
        self.assertEqual(len(other.json()["followersGrowth"]), 7)

    def test_history_days_validated(self):
        res = self.client.get(
            f"/api/analytics/creator/{self.foreign.id}/history", params={"days": 0}, headers=self.auth(self.other),
        )
        self.assertEqual(res.status_code, 422)


class TestCreatorRoutes(RouteTestCase):

    def test_create_list_delete(self):
        res = self.client.post("/api/creators", json={
            "name": "Cleo", "platform": "X", "username": "cleo",
        }, headers=self.auth(self.owner))
        self.assertEqual(res.status_code, 201)
        creator_id = res.json()["creator"]["id"]
        self.assertEqual(res.json()["creator"]["_id"], creator_id)

        listing = self.client.get("/api/creators", headers=self.auth(self.owner)).json()
        self.assertEqual(listing["total"], 2)
        self.assertEqual({c["username"] for c in listing["creators"]}, {"ada", "cleo"})
        self.assertTrue(all(c["_id"] == c["id"] for c in listing["creators"]))

        detail = self.client.get(f"/api/creators/{creator_id}", headers=self.auth(self.owner)).json()
        self.assertEqual(len(detail["analytics"]["historical"]), 30)
        self.assertEqual(detail["analytics"]["_id"], detail["analytics"]["id"])

        deleted = self.client.delete(f"/api/creators/{creator_id}", headers=self.auth(self.owner))
        self.assertEqual(deleted.json(), {"ok": True})
        self.assertIsNone(self.analytics.items.get(creator_id))

    def test_create_errors(self):
        missing = self.client.post("/api/creators", json={"name": "Cleo"}, headers=self.auth(self.owner))
        self.assertEqual(missing.status_code, 400)
        dup = self.client.post("/api/creators", json={
            "name": "Ada", "platform": "X", "username": "ada",
        }, headers=self.auth(self.owner))
        self.assertEqual(dup.status_code, 409)

    def test_non_string_fields_are_rejected(self):
        res = self.client.post("/api/creators", json={
            "name": 5, "platform": "X", "username": "five",
        }, headers=self.auth(self.owner))
        self.assertEqual(res.status_code, 422)

        res = self.client.put(
            f"/api/creators/{self.creator.id}", json={"username": ["ada"]}, headers=self.auth(self.owner),
        )
        self.assertEqual(res.status_code, 422)
        self.assertEqual(self.creator.username, "ada")

        res = self.client.post("/api/auth/login", json={"email": 42, "password": "secret123"})
        self.assertEqual(res.status_code, 422)

    def test_update_strips_fields(self):
        res = self.client.put(
            f"/api/creators/{self.creator.id}", json={"name": "  Ada L  ", "username": " ada2 "},
            headers=self.auth(self.owner),
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["creator"]["name"], "Ada L")
        self.assertEqual(res.json()["creator"]["username"], "ada2")

    def test_update_forbidden_for_non_owner(self):
        res = self.client.put(f"/api/creators/{self.creator.id}", json={"name": "Z"}, headers=self.auth(self.other))
        self.assertEqual(res.status_code, 403)


class TestAdminRoutes(RouteTestCase):

    def test_users_listing_is_admin_only(self):
        self.assertEqual(self.client.get("/api/users", headers=self.auth(self.owner)).status_code, 403)

        users = self.client.get("/api/users", headers=self.auth(self.admin)).json()["users"]
        counts = {u["email"]: u["creatorCount"] for u in users}
        self.assertEqual(counts, {"owner@test.com": 1, "other@test.com": 1, "admin@test.com": 0})

    def test_disable_user(self):
        res = self.client.patch(
            f"/api/users/{self.other.id}/disable", json={"disabled": True}, headers=self.auth(self.admin),
        )
        self.assertTrue(res.json()["user"]["disabled"])
        self.assertEqual(self.client.get("/api/auth/me", headers=self.auth(self.other)).status_code, 403)


class TestUploadRoutes(RouteTestCase):

    def test_upload_image(self):
        res = self.client.post(
            "/api/upload/creator-image",
            files={"image": ("avatar.png", b"\x89PNG fake", "image/png")},
            headers=self.auth(self.owner),
        )
        self.assertEqual(res.status_code, 200)
        url = res.json()["url"]
        self.assertTrue(url.startswith("https://bucket.s3.us-east-1.amazonaws.com/creators/"))
        self.assertTrue(url.endswith("_avatar.png"))
        kwargs = self.storage_client.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "bucket")
        self.assertEqual(kwargs["ContentType"], "image/png")

    def test_rejects_non_images(self):
        res = self.client.post(
            "/api/upload/creator-image",
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=self.auth(self.owner),
        )
        self.assertEqual(res.status_code, 400)
        self.storage_client.put_object.assert_not_called()

    def test_missing_file(self):
        res = self.client.post(
            "/api/upload/creator-image",
            files={"other": ("notes.txt", b"hello", "text/plain")},
            headers=self.auth(self.owner),
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json(), {"detail": "No file uploaded"})


if __name__ == "__main__":
    unittest.main()

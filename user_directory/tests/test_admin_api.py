import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from user_directory.app.core.access_policy import AdminCredentialsPolicy, build_access_policy
from user_directory.app.core.errors import register_exception_handlers
from user_directory.app.modules.admin.router import router as admin_router
from user_directory.tests._util_deps import FakeMediaStore, make_deps
from user_directory.tests._util_tempdir import cleanup_dir, make_temp_dir


class _AdminAPITestBase(unittest.TestCase):
    access_policy = None

    def setUp(self):
        self.td = make_temp_dir(prefix="user_directory_admin_api")
        self.media = FakeMediaStore()
        self.deps = make_deps(self.td / "users.json", media_store=self.media, access_policy=self.access_policy)
        self.service = self.deps.account_service

        self.app = FastAPI()
        self.app.state.deps = self.deps
        register_exception_handlers(self.app)
        self.app.include_router(admin_router, prefix="/api/admin")
        self.client = TestClient(self.app)

    def tearDown(self):
        self.client.close()
        cleanup_dir(self.td)


class TestAdminAPI(_AdminAPITestBase):
    def test_list_users(self):
        self.service.register("a@x.com", "secret")
        self.service.register("b@x.com", "secret")

        resp = self.client.get("/api/admin/users")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual([u["email"] for u in body["users"]], ["a@x.com", "b@x.com"])
        self.assertTrue(all("password" not in u for u in body["users"]))

    def test_update_status(self):
        user = self.service.register("a@x.com", "secret")

        resp = self.client.put(f"/api/admin/users/{user['_id']}/status", json={"isActive": False})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "User status updated")
        self.assertFalse(body["user"]["isActive"])
        self.assertFalse(self.deps.record_store.load().users[0]["isActive"])

    def test_update_status_unknown_user_is_404(self):
        resp = self.client.put("/api/admin/users/missing/status", json={"isActive": True})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"success": False, "message": "User not found", "error": "not_found"})

    def test_update_status_requires_boolean(self):
        user = self.service.register("a@x.com", "secret")
        resp = self.client.put(f"/api/admin/users/{user['_id']}/status", json={})
        self.assertEqual(resp.status_code, 400)

    def test_delete_user_releases_picture(self):
        user = self.service.register("a@x.com", "secret", {"picturePublicId": "user-profiles/pic"})

        resp = self.client.delete(f"/api/admin/users/{user['_id']}")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["message"], "User deleted successfully")
        self.assertEqual(body["user"]["_id"], user["_id"])
        self.assertEqual(self.media.deleted, ["user-profiles/pic"])
        self.assertEqual(self.deps.record_store.load().users, [])

    def test_delete_user_when_media_delete_fails(self):
        self.media.fail_delete = True
        user = self.service.register("a@x.com", "secret", {"picturePublicId": "user-profiles/pic"})

        resp = self.client.delete(f"/api/admin/users/{user['_id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.deps.record_store.load().users, [])

    def test_delete_unknown_user_is_404(self):
        self.assertEqual(self.client.delete("/api/admin/users/missing").status_code, 404)


class TestAdminCredentialsPolicy(_AdminAPITestBase):
    access_policy = AdminCredentialsPolicy()

    def setUp(self):
        super().setUp()
        doc = self.deps.record_store.load()
        doc.admins.append(
            {"email": "root@x.com", "password": self.deps.password_hasher.hash("admin123"), "role": "admin"}
        )
        self.deps.record_store.save(doc)
        self.service.register("a@x.com", "secret")

    def test_missing_credentials_is_401(self):
        resp = self.client.get("/api/admin/users")
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(resp.json()["success"])

    def test_wrong_admin_password_is_401(self):
        resp = self.client.get(
            "/api/admin/users",
            headers={"X-Admin-Email": "root@x.com", "X-Admin-Password": "nope"},
        )
        self.assertEqual(resp.status_code, 401)

    def test_regular_user_is_403(self):
        resp = self.client.get(
            "/api/admin/users",
            headers={"X-Admin-Email": "a@x.com", "X-Admin-Password": "secret"},
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["error"], "forbidden")

    def test_admin_is_allowed(self):
        resp = self.client.get(
            "/api/admin/users",
            headers={"X-Admin-Email": "root@x.com", "X-Admin-Password": "admin123"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()["users"]), 1)


class TestBuildAccessPolicy(unittest.TestCase):
    def test_modes(self):
        self.assertEqual(build_access_policy("open").name, "open")
        self.assertEqual(build_access_policy("Credentials").name, "credentials")
        with self.assertRaises(ValueError):
            build_access_policy("jwt")


if __name__ == "__main__":
    unittest.main()

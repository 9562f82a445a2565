"""API tests for login, logout, /auth/me and bearer-token handling."""

import unittest
from datetime import UTC, datetime

from app.core.security import decode_access_token, issue_token_for
from app.models import UserLevel

from support import ApiTestCase


class TestLogin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_user("admin", password="admin-pass", level=UserLevel.ADMIN, name="Admin User")

    def test_valid_credentials_return_token_and_summary(self) -> None:
        resp = self.client.post("/api/auth/login", json={"username": "admin", "password": "admin-pass"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(
            data["user"],
            {
                "id": self.admin.id,
                "username": "admin",
                "name": "Admin User",
                "level": "admin",
                "roles": ["ROLE_ADMIN", "ROLE_USER"],
            },
        )
        self.assertNotIn("password", data["user"])
        self.assertNotIn("password_hash", data["user"])

        claims = decode_access_token(data["token"])
        self.assertEqual(claims["sub"], "admin")
        self.assertIn("ROLE_ADMIN", claims["roles"])
        self.assertGreater(claims["exp"], claims["iat"])

    def test_failures_are_uniform(self) -> None:
        self.make_user("sleeper", password="sleeper-pass", active=False)
        cases = {
            "wrong password": {"username": "admin", "password": "wrongpassword"},
            "unknown user": {"username": "nonexistent", "password": "password"},
            "inactive": {"username": "sleeper", "password": "sleeper-pass"},
            "missing username": {"password": "admin-pass"},
            "missing password": {"username": "admin"},
            "empty strings": {"username": "", "password": ""},
        }
        bodies = []
        for label, body in cases.items():
            with self.subTest(case=label):
                resp = self.client.post("/api/auth/login", json=body)
                self.assertEqual(resp.status_code, 401)
                self.assertIn("error", resp.json())
                bodies.append(resp.json())
        self.assertTrue(all(b == bodies[0] for b in bodies))
        self.assertEqual(set(bodies[0]), {"error", "message"})

    def test_missing_body_is_unauthorized(self) -> None:
        resp = self.client.post("/api/auth/login")
        self.assertEqual(resp.status_code, 401)

    def test_unusable_bodies_are_unauthorized_not_invalid(self) -> None:
        expected = self.client.post(
            "/api/auth/login", json={"username": "admin", "password": "wrong"}
        ).json()
        json_bodies = {
            "array": [1, 2],
            "string": "admin",
            "null credentials": {"username": None, "password": None},
            "numeric username": {"username": 123, "password": "x"},
            "nested password": {"username": "admin", "password": {"value": "admin-pass"}},
        }
        for label, body in json_bodies.items():
            with self.subTest(case=label):
                resp = self.client.post("/api/auth/login", json=body)
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json(), expected)

        raw_bodies = {
            "malformed json": (b"{not json", "application/json"),
            "invalid utf-8": (b"\xff\xfe", "application/json"),
            "form encoded": (b"username=admin&password=admin-pass", "application/x-www-form-urlencoded"),
        }
        for label, (raw, content_type) in raw_bodies.items():
            with self.subTest(case=label):
                resp = self.client.post(
                    "/api/auth/login", content=raw, headers={"Content-Type": content_type}
                )
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json(), expected)

    def test_user_without_password_cannot_log_in(self) -> None:
        self.make_user("nopass", password=None)
        resp = self.client.post("/api/auth/login", json={"username": "nopass", "password": "x"})
        self.assertEqual(resp.status_code, 401)

    def test_roles_follow_level(self) -> None:
        self.make_user("adv", level=UserLevel.ADVANCED)
        claims = decode_access_token(self.login("adv"))
        self.assertEqual(claims["roles"], ["ROLE_ADVANCED", "ROLE_USER"])


class TestBearerAuthentication(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_user("admin", level=UserLevel.ADMIN)

    def test_token_grants_access_to_protected_endpoint(self) -> None:
        resp = self.client.get("/api/users", headers=self.auth_headers("admin"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()[0]["username"], "admin")

    def test_missing_token(self) -> None:
        resp = self.client.get("/api/users")
        self.assertEqual(resp.status_code, 401)
        self.assertIn("Not privileged", resp.json()["message"])
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_invalid_token(self) -> None:
        resp = self.client.get("/api/users", headers={"Authorization": "Bearer invalid.token.here"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Authentication failed")

    def test_wrong_scheme(self) -> None:
        token = self.login("admin")
        for header in (f"Token {token}", token, f"bearer {token}"):
            with self.subTest(header=header[:10]):
                resp = self.client.get("/api/users", headers={"Authorization": header})
                self.assertEqual(resp.status_code, 401)

    def test_expired_token(self) -> None:
        issued = int(datetime.now(UTC).timestamp()) - 7200
        token = issue_token_for("admin", ["ROLE_ADMIN", "ROLE_USER"], now=issued)
        resp = self.client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)

    def test_token_for_deleted_user_is_rejected(self) -> None:
        ghost = self.make_user("ghost", level=UserLevel.ADMIN)
        headers = self.auth_headers("ghost")
        resp = self.client.delete(f"/api/users/{ghost.id}", headers=self.auth_headers("admin"))
        self.assertEqual(resp.status_code, 204)
        resp = self.client.get("/api/users", headers=headers)
        self.assertEqual(resp.status_code, 401)

    def test_token_for_deactivated_user_is_rejected(self) -> None:
        user = self.make_user("temp", level=UserLevel.BASIC)
        headers = self.auth_headers("temp")
        resp = self.client.put(
            f"/api/users/{user.id}", json={"active": False}, headers=self.auth_headers("admin")
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get("/api/auth/me", headers=headers)
        self.assertEqual(resp.status_code, 401)

    def test_demoted_admin_loses_access_despite_token_roles(self) -> None:
        second = self.make_user("second", level=UserLevel.ADMIN)
        stale_headers = self.auth_headers("second")
        resp = self.client.put(
            f"/api/users/{second.id}", json={"level": "basic"}, headers=self.auth_headers("admin")
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get("/api/users", headers=stale_headers)
        self.assertEqual(resp.status_code, 403)

    def test_forged_roles_claim_is_ignored(self) -> None:
        self.make_user("basic")
        token = issue_token_for("basic", ["ROLE_ADMIN", "ROLE_USER"])
        resp = self.client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 403)


class TestLogoutAndMe(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user("bob", level=UserLevel.ADVANCED)

    def test_logout_with_token(self) -> None:
        resp = self.client.post("/api/auth/logout", headers=self.auth_headers("bob"))
        self.assertEqual(resp.status_code, 200)
        self.assertIn("logged out", resp.json()["message"])

    def test_logout_without_token(self) -> None:
        resp = self.client.post("/api/auth/logout")
        self.assertEqual(resp.status_code, 401)

    def test_me_uses_stored_level(self) -> None:
        resp = self.client.get("/api/auth/me", headers=self.auth_headers("bob"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"id": self.user.id, "username": "bob", "roles": ["ROLE_ADVANCED", "ROLE_USER"]},
        )


if __name__ == "__main__":
    unittest.main()

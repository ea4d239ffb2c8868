"""HTTP tests: session cookie flow, error envelope and role-gated routes through FastAPI."""

import unittest
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import hash_password
from app.main import app
from app.models import Base, User
from app.schemas.upload import UploadResponse

PASSWORD = "api-test-password"
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.password_hash = hash_password(PASSWORD)

    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.SessionTesting = sessionmaker(bind=engine, autoflush=False)

        db = self.SessionTesting()
        db.add_all(
            [
                User(username="alice", password_hash=self.password_hash, role="author"),
                User(username="bob", password_hash=self.password_hash, role="author"),
                User(username="root", password_hash=self.password_hash, role="super-admin"),
            ]
        )
        db.commit()
        db.close()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _client(self, username: str | None = None) -> TestClient:
        client = TestClient(app)
        if username is not None:
            resp = client.post(
                "/api/v1/auth/login", json={"username": username, "password": PASSWORD}
            )
            self.assertEqual(resp.status_code, 200, resp.text)
        return client


class TestAuthRoutes(ApiTestCase):
    def test_login_sets_http_only_cookie(self) -> None:
        client = TestClient(app)
        resp = client.post(
            "/api/v1/auth/login", json={"username": "alice", "password": PASSWORD}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["username"], "alice")
        self.assertEqual(resp.json()["user"]["role"], "author")
        set_cookie = resp.headers["set-cookie"].lower()
        self.assertTrue(set_cookie.startswith("session="))
        self.assertIn("httponly", set_cookie)

        session = client.get("/api/v1/auth/session")
        self.assertEqual(session.json()["user"]["username"], "alice")

    def test_bad_credentials_return_error_envelope(self) -> None:
        client = TestClient(app)
        resp = client.post(
            "/api/v1/auth/login", json={"username": "alice", "password": "wrong-password"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Invalid username or password"})
        self.assertNotIn("set-cookie", resp.headers)

    def test_session_is_null_without_or_with_bad_cookie(self) -> None:
        client = TestClient(app)
        self.assertIsNone(client.get("/api/v1/auth/session").json())
        tampered = TestClient(app, cookies={"session": "garbage"})
        self.assertIsNone(tampered.get("/api/v1/auth/session").json())

    def test_empty_login_uses_error_envelope(self) -> None:
        resp = TestClient(app).post("/api/v1/auth/login", json={"username": "", "password": ""})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(list(resp.json()), ["error"])
        self.assertTrue(resp.json()["error"].startswith("username: "), resp.text)

    def test_logout_expires_cookie(self) -> None:
        client = self._client("alice")
        resp = client.post("/api/v1/auth/logout")
        self.assertEqual(resp.status_code, 204)
        set_cookie = resp.headers["set-cookie"].lower()
        self.assertTrue(set_cookie.startswith("session="))
        self.assertIn("max-age=0", set_cookie)


class TestPostRoutes(ApiTestCase):
    def test_author_publish_request_then_approval(self) -> None:
        author = self._client("alice")
        created = author.post(
            "/api/v1/admin/posts",
            json={"title": "Hello", "category": "News", "content": "<p>x</p>", "published": True},
        )
        self.assertEqual(created.status_code, 201, created.text)
        post_id = created.json()["id"]
        self.assertEqual(created.json()["status"], "pending_approval")

        public = TestClient(app)
        self.assertEqual(public.get("/api/v1/posts").json(), [])
        self.assertEqual(public.get(f"/api/v1/posts/{post_id}").status_code, 404)

        denied = author.post(f"/api/v1/admin/posts/{post_id}/approve")
        self.assertEqual(denied.status_code, 403)
        self.assertIn("error", denied.json())

        admin = self._client("root")
        approved = admin.post(f"/api/v1/admin/posts/{post_id}/approve")
        self.assertEqual(approved.status_code, 200)
        self.assertEqual(approved.json()["status"], "published")

        listing = public.get("/api/v1/posts").json()
        self.assertEqual([p["id"] for p in listing], [post_id])
        categories = public.get("/api/v1/posts/categories").json()["categories"]
        self.assertEqual(categories[0]["category"], "News")

    def test_mutations_without_session_are_denied(self) -> None:
        client = TestClient(app)
        resp = client.post("/api/v1/admin/posts", json={"title": "x", "category": "y"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "You must be signed in to do that"})
        self.assertEqual(client.delete("/api/v1/admin/posts/1").status_code, 403)

    def test_missing_title_is_422_with_message(self) -> None:
        resp = self._client("alice").post("/api/v1/admin/posts", json={"category": "News"})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json(), {"error": "Title is required"})

    def test_overlong_title_uses_error_envelope(self) -> None:
        resp = self._client("alice").post(
            "/api/v1/admin/posts", json={"title": "x" * 300, "category": "News"}
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(
            resp.json(), {"error": "title: String should have at most 255 characters"}
        )
        self.assertEqual(self._client("alice").get("/api/v1/admin/posts").json(), [])

    def test_non_owner_delete_is_denied(self) -> None:
        alice = self._client("alice")
        post_id = alice.post(
            "/api/v1/admin/posts", json={"title": "Mine", "category": "News"}
        ).json()["id"]
        bob = self._client("bob")
        self.assertEqual(bob.delete(f"/api/v1/admin/posts/{post_id}").status_code, 403)
        self.assertEqual(len(alice.get("/api/v1/admin/posts").json()), 1)
        self.assertEqual(bob.get("/api/v1/admin/posts").json(), [])
        resp = alice.delete(f"/api/v1/admin/posts/{post_id}")
        self.assertEqual(resp.json(), {"id": post_id, "deleted": True})

    def test_profile_round_trip(self) -> None:
        client = self._client("alice")
        saved = client.put(
            "/api/v1/admin/profile",
            json={"bio": "Security writer", "avatar_url": "https://cdn.example/a.png"},
        )
        self.assertEqual(saved.status_code, 200)
        profile = client.get("/api/v1/admin/profile").json()
        self.assertEqual(profile["bio"], "Security writer")
        self.assertEqual(profile["avatar_url"], "https://cdn.example/a.png")

    def test_upload_without_file(self) -> None:
        resp = self._client("alice").post("/api/v1/admin/uploads")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "No file supplied"})

    def _upload_settings(self) -> Settings:
        return Settings(
            MAX_UPLOAD_BYTES=1024,
            STORAGE_URL="https://proj.supabase.co",
            STORAGE_SERVICE_KEY=SecretStr("service-key"),
        )

    @patch("app.services.storage.httpx.AsyncClient")
    def test_oversized_upload_rejected(self, mock_client_class: MagicMock) -> None:
        app.dependency_overrides[get_settings] = self._upload_settings
        resp = self._client("alice").post(
            "/api/v1/admin/uploads",
            files={"file": ("big.png", PNG_HEADER + b"\x00" * 4096, "image/png")},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "File size must not exceed 1 KB"})
        mock_client_class.assert_not_called()

    @patch("app.api.v1.admin.storage.upload_image", new_callable=AsyncMock)
    def test_upload_reads_one_byte_past_limit(self, mock_upload: AsyncMock) -> None:
        mock_upload.return_value = UploadResponse(public_url="https://cdn/x.png", path="1/x.png")
        app.dependency_overrides[get_settings] = self._upload_settings
        resp = self._client("alice").post(
            "/api/v1/admin/uploads",
            files={"file": ("big.png", PNG_HEADER + b"\x00" * 100_000, "image/png")},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(len(mock_upload.call_args.kwargs["content"]), 1025)


if __name__ == "__main__":
    unittest.main()

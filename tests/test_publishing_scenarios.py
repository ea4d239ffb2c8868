"""End-to-end publishing workflow: author request, super-admin approval, edits of published posts."""

import unittest
from unittest.mock import patch

from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.security import hash_password
from app.models import Base, User
from app.schemas.posts import PostInput
from app.services import post_lifecycle, post_queries
from app.services.errors import AccessDenied, NotFound
from app.services.session_manager import get_session, login

SETTINGS = Settings(SESSION_SECRET=SecretStr("scenario-secret"))


def _make_db() -> Session:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)()


class PublishingScenarioTestCase(unittest.TestCase):
    """Users sign in through the session manager; the token is what gets passed around."""

    @classmethod
    def setUpClass(cls) -> None:
        cls.password_hash = hash_password("s3cret-pass")

    def setUp(self) -> None:
        self.db = _make_db()
        self.db.add_all(
            [
                User(username="alice", password_hash=self.password_hash, role="author"),
                User(username="root", password_hash=self.password_hash, role="super-admin"),
            ]
        )
        self.db.commit()
        self.author_token = login(self.db, "alice", "s3cret-pass", settings=SETTINGS).token
        self.admin_token = login(self.db, "root", "s3cret-pass", settings=SETTINGS).token

    def tearDown(self) -> None:
        self.db.close()

    def _session(self, token: str):
        return get_session(token, settings=SETTINGS)

    def _public_ids(self) -> list[int]:
        return [p.id for p in post_queries.list_published_posts(self.db)]

    def _author_requests_publication(self):
        return post_lifecycle.create_post(
            self.db,
            self._session(self.author_token),
            PostInput(
                title="Phishing kits in 2026",
                content="<p>Draft body</p>",
                category="Threat Intel",
                published=True,
            ),
        )


class TestScenarioAuthorPublishRequest(PublishingScenarioTestCase):
    def test_pending_post_is_not_public(self) -> None:
        post = self._author_requests_publication()
        self.assertEqual(post.status, "pending_approval")
        self.assertNotIn(post.id, self._public_ids())
        with self.assertRaises(NotFound):
            post_queries.get_published_post(self.db, post.id)

    def test_author_sees_own_post_in_dashboard(self) -> None:
        post = self._author_requests_publication()
        dashboard = post_queries.list_dashboard_posts(self.db, self._session(self.author_token))
        self.assertEqual([p.id for p in dashboard], [post.id])
        preview = post_queries.get_post_preview(self.db, self._session(self.author_token), post.id)
        self.assertEqual(preview.status, "pending_approval")


class TestScenarioSuperAdminApproval(PublishingScenarioTestCase):
    def test_approval_makes_post_public(self) -> None:
        post = self._author_requests_publication()
        pending = post_queries.list_pending_posts(self.db, self._session(self.admin_token))
        self.assertEqual([p.id for p in pending], [post.id])

        approved = post_lifecycle.approve_post(self.db, self._session(self.admin_token), post.id)

        self.assertEqual(approved.status, "published")
        self.assertIn(post.id, self._public_ids())
        self.assertEqual(post_queries.get_published_post(self.db, post.id).title, post.title)
        self.assertEqual(post_queries.list_pending_posts(self.db, self._session(self.admin_token)), [])

    def test_author_cannot_approve_or_see_queue(self) -> None:
        post = self._author_requests_publication()
        with self.assertRaises(AccessDenied):
            post_lifecycle.approve_post(self.db, self._session(self.author_token), post.id)
        with self.assertRaises(AccessDenied):
            post_queries.list_pending_posts(self.db, self._session(self.author_token))
        self.assertNotIn(post.id, self._public_ids())


class TestScenarioEditPublishedPost(PublishingScenarioTestCase):
    """Saving a published post recomputes its status from the submitted publish flag."""

    def _published_post(self):
        post = self._author_requests_publication()
        return post_lifecycle.approve_post(self.db, self._session(self.admin_token), post.id)

    def test_author_edit_with_publish_flag_returns_to_pending(self) -> None:
        post = self._published_post()
        edited = post_lifecycle.update_post(
            self.db,
            self._session(self.author_token),
            post.id,
            PostInput(title="Phishing kits in 2026 (updated)", category="Threat Intel", published=True),
        )
        self.assertEqual(edited.status, "pending_approval")
        self.assertNotIn(post.id, self._public_ids())

    def test_author_edit_without_publish_flag_becomes_draft(self) -> None:
        post = self._published_post()
        edited = post_lifecycle.update_post(
            self.db,
            self._session(self.author_token),
            post.id,
            PostInput(title="Typo fix", category="Threat Intel"),
        )
        self.assertEqual(edited.status, "draft")
        self.assertNotIn(post.id, self._public_ids())

    def test_super_admin_edit_keeps_it_published(self) -> None:
        post = self._published_post()
        edited = post_lifecycle.update_post(
            self.db,
            self._session(self.admin_token),
            post.id,
            PostInput(title="Edited by editor", category="Threat Intel", published=True),
        )
        self.assertEqual(edited.status, "published")
        self.assertIn(post.id, self._public_ids())


class TestPublicQueries(PublishingScenarioTestCase):
    def test_grouping_and_filters(self) -> None:
        admin = self._session(self.admin_token)
        for title, category, featured in (
            ("A", "Malware", True),
            ("B", "AI", False),
            ("C", "Malware", False),
        ):
            post_lifecycle.create_post(
                self.db,
                admin,
                PostInput(title=title, category=category, featured=featured, published=True),
            )
        post_lifecycle.create_post(
            self.db, admin, PostInput(title="Hidden", category="AI", published=False)
        )

        groups = post_queries.group_by_category(post_queries.list_published_posts(self.db))
        self.assertEqual(list(groups), ["AI", "Malware"])
        self.assertEqual(sorted(p.title for p in groups["Malware"]), ["A", "C"])
        self.assertEqual([p.title for p in groups["AI"]], ["B"])

        featured = post_queries.list_published_posts(self.db, featured=True)
        self.assertEqual([p.title for p in featured], ["A"])
        malware = post_queries.list_published_posts(self.db, category="Malware")
        self.assertEqual(len(malware), 2)

    @patch("app.services.post_queries.MAX_PUBLIC_POSTS", 2)
    def test_listing_is_capped_but_category_index_is_not(self) -> None:
        admin = self._session(self.admin_token)
        for title in ("One", "Two", "Three"):
            post_lifecycle.create_post(
                self.db, admin, PostInput(title=title, category="AI", published=True)
            )

        self.assertEqual(len(post_queries.list_published_posts(self.db)), 2)
        everything = post_queries.list_published_posts(self.db, limit=None)
        self.assertEqual(sorted(p.title for p in everything), ["One", "Three", "Two"])

    def test_preview_of_someone_elses_post_denied(self) -> None:
        admin = self._session(self.admin_token)
        post = post_lifecycle.create_post(
            self.db, admin, PostInput(title="Editor draft", category="AI")
        )
        with self.assertRaises(AccessDenied):
            post_queries.get_post_preview(self.db, self._session(self.author_token), post.id)
        self.assertEqual(
            post_queries.get_post_preview(self.db, admin, post.id).status, "draft"
        )


if __name__ == "__main__":
    unittest.main()

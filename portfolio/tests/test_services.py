import unittest
from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

from content.types import BlogLike, BlogPost, ContactSubmission, PageView, Project
from portfolio.auth import InMemorySessionStore, RedisSessionStore, hash_password, verify_password
from portfolio.db import InMemoryDbClient
from portfolio.errors import (
    ConflictError,
    InvalidCredentials,
    InvalidSession,
    NotFoundError,
    SessionExpired,
    ValidationFailed,
)
from portfolio.services import accounts, analytics, blog, catalog, media
from portfolio.services.messages import MessageFilters, filter_messages, message_analytics
from portfolio.storage import InMemoryStorageClient

IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/16.6 Mobile/15E148 Safari/604.1"
)
ANDROID_PHONE_UA = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Mobile Safari/537.36"
)
ANDROID_TABLET_UA = (
    "Mozilla/5.0 (Linux; Android 13; SM-X710) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
DESKTOP_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36 Edg/120.0"
)


def _ts(year: int, month: int, day: int, hour: int = 12) -> float:
    return datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp()


class SessionStoreTests(unittest.TestCase):
    def setUp(self):
        self.now = 1000.0
        self.store = InMemorySessionStore("secret", timeout_seconds=600, clock=lambda: self.now)

    def test_touch_resets_idle_timer(self):
        token = self.store.create("user-1")
        self.now += 599
        self.assertEqual(self.store.touch(token), "user-1")
        self.now += 599
        self.assertEqual(self.store.touch(token), "user-1")

    def test_idle_session_expires_once(self):
        token = self.store.create("user-1")
        self.now += 601
        with self.assertRaises(SessionExpired):
            self.store.touch(token)
        with self.assertRaises(InvalidSession):
            self.store.touch(token)

    def test_tokens_from_other_secret_are_rejected(self):
        other = InMemorySessionStore("other-secret")
        token = other.create("user-1")
        with self.assertRaises(InvalidSession):
            self.store.touch(token)

    def test_redis_store_refreshes_ttl(self):
        client = MagicMock()
        store = RedisSessionStore(
            url="redis://unused", secret_key="secret", timeout_seconds=600, client=client
        )
        token = store.create("user-1")
        key = client.setex.call_args.args[0]
        self.assertTrue(key.startswith("portfolio:session:"))
        self.assertEqual(client.setex.call_args.args[1:], (600, "user-1"))

        client.get.return_value = b"user-1"
        self.assertEqual(store.touch(token), "user-1")
        client.expire.assert_called_once_with(key, 600)

        client.get.return_value = None
        with self.assertRaises(SessionExpired):
            store.touch(token)

        store.revoke(token)
        client.delete.assert_called_once_with(key)

    def test_password_hashing(self):
        hashed = hash_password("s3cret-pass")
        self.assertNotEqual(hashed, "s3cret-pass")
        self.assertTrue(verify_password(hashed, "s3cret-pass"))
        self.assertFalse(verify_password(hashed, "wrong"))


class AccountsTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.sessions = InMemorySessionStore("secret")

    def test_create_admin_rejects_duplicates(self):
        accounts.create_admin(self.db, "Admin@Example.com", "password123")
        with self.assertRaises(ConflictError):
            accounts.create_admin(self.db, "admin@example.com", "password456")
        with self.assertRaises(ValidationFailed):
            accounts.create_admin(self.db, "other@example.com", "short")

    def test_login_updates_last_login(self):
        user = accounts.create_admin(self.db, "admin@example.com", "password123")
        self.assertIsNone(user.last_login)
        token, logged_in = accounts.login(self.db, self.sessions, "ADMIN@example.com", "password123")
        self.assertIsNotNone(logged_in.last_login)
        self.assertEqual(self.sessions.touch(token), user.id)

        with self.assertRaises(InvalidCredentials):
            accounts.login(self.db, self.sessions, "admin@example.com", "nope")
        with self.assertRaises(InvalidCredentials):
            accounts.login(self.db, self.sessions, "nobody@example.com", "password123")


class AnalyticsServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_device_and_browser_detection(self):
        self.assertEqual(analytics.detect_device(IPAD_UA), "tablet")
        self.assertEqual(analytics.detect_device(ANDROID_TABLET_UA), "tablet")
        self.assertEqual(analytics.detect_device(ANDROID_PHONE_UA), "mobile")
        self.assertEqual(analytics.detect_device(DESKTOP_UA), "desktop")
        self.assertEqual(analytics.detect_device(None), "desktop")
        self.assertEqual(analytics.detect_browser(DESKTOP_UA), "Edge")
        self.assertEqual(analytics.detect_browser(ANDROID_PHONE_UA), "Chrome")
        self.assertEqual(analytics.detect_browser(IPAD_UA), "Safari")

    def test_dashboard_counts_per_day(self):
        self.db.add(PageView(path="/", session_id="a", created_at=_ts(2024, 3, 1)))
        self.db.add(PageView(path="/blog", session_id="a", created_at=_ts(2024, 3, 1, 13)))
        self.db.add(PageView(path="/", session_id="b", created_at=_ts(2024, 3, 1, 14)))
        self.db.add(PageView(path="/", created_at=_ts(2024, 3, 3)))
        self.db.add(PageView(path="/", session_id="c", created_at=_ts(2024, 4, 1)))

        result = analytics.dashboard_analytics(self.db, date(2024, 3, 1), date(2024, 3, 3))
        self.assertEqual(result["dates"], ["2024-03-01", "2024-03-02", "2024-03-03"])
        self.assertEqual(result["page_views"], [3, 0, 1])
        self.assertEqual(result["visitors"], [2, 0, 1])

        with self.assertRaises(ValidationFailed):
            analytics.dashboard_analytics(self.db, date(2024, 3, 3), date(2024, 3, 1))

    def test_blog_performance_sorted_by_views(self):
        self.db.add(BlogPost(title="Quiet", content="", view_count=3, like_count=1))
        self.db.add(BlogPost(title="Popular", content="", view_count=40, like_count=7))
        performance = analytics.blog_performance(self.db)
        self.assertEqual([p["title"] for p in performance], ["Popular", "Quiet"])
        self.assertEqual(performance[0]["likes"], 7)


class MessageFilterTests(unittest.TestCase):
    def test_filters_exclude_archived_and_sort(self):
        messages = [
            ContactSubmission("Ada", "ada@example.com", "Hi", "First", created_at=1.0),
            ContactSubmission("Bob", "bob@example.com", "Hey", "Second", created_at=2.0, is_read=True),
            ContactSubmission(
                "Cy", "cy@example.com", "Yo", "Third", created_at=3.0, status="archived"
            ),
            ContactSubmission(
                "Di", "di@example.com", "Re", "Fourth", created_at=4.0, status="replied", is_read=True
            ),
        ]
        newest = filter_messages(messages, MessageFilters())
        self.assertEqual([m.full_name for m in newest], ["Di", "Bob", "Ada"])

        oldest = filter_messages(messages, MessageFilters(sort="asc"))
        self.assertEqual([m.full_name for m in oldest], ["Ada", "Bob", "Di"])

        replied = filter_messages(messages, MessageFilters(status="replied"))
        self.assertEqual([m.full_name for m in replied], ["Di"])

        search = filter_messages(messages, MessageFilters(search="BOB@"))
        self.assertEqual([m.full_name for m in search], ["Bob"])

    def test_trend_includes_empty_days(self):
        db = InMemoryDbClient()
        db.add(ContactSubmission("Ada", "a@example.com", "Hi", "Hello", created_at=_ts(2024, 3, 7)))
        db.add(ContactSubmission("Bob", "b@example.com", "Hi", "Hello", created_at=_ts(2024, 3, 5)))
        db.add(ContactSubmission("Old", "o@example.com", "Hi", "Hello", created_at=_ts(2024, 2, 1)))

        result = message_analytics(db, now=_ts(2024, 3, 7, 18))
        trend = result["daily_message_trend"]
        self.assertEqual(trend[0], {"date": "2024-03-01", "count": 0})
        self.assertEqual(trend[4], {"date": "2024-03-05", "count": 1})
        self.assertEqual(trend[-1], {"date": "2024-03-07", "count": 1})
        self.assertEqual(result["total_messages"], 3)


class CatalogTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_new_projects_are_appended(self):
        first = catalog.create_record(self.db, Project, {"title": "A", "category": "Web"})
        second = catalog.create_record(self.db, Project, {"title": "B", "category": "Web"})
        self.assertEqual((first.sort_order, second.sort_order), (0, 1))

    def test_reorder_validates_ids(self):
        project = catalog.create_project(self.db, {"title": "A", "category": "Web"})
        with self.assertRaises(ValidationFailed):
            catalog.reorder_projects(self.db, [project.id, project.id])
        with self.assertRaises(NotFoundError):
            catalog.reorder_projects(self.db, [project.id, "missing"])

    def test_delete_missing_record(self):
        with self.assertRaises(NotFoundError):
            catalog.delete_record(self.db, Project, "missing")


class BlogLikeTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.post = self.db.add(
            BlogPost(title="Hello", slug="hello", content="", published=True, like_count=0)
        )

    def test_unlike_never_stores_a_negative_count(self):
        self.db.add(BlogLike(blog_id=self.post.id, visitor_id="v1"))
        self.assertEqual(blog.toggle_like(self.db, "hello", "v1"), (False, 0))
        self.assertEqual(self.db.get(BlogPost, self.post.id).like_count, 0)

    def test_racing_like_is_counted_once(self):
        self.assertEqual(blog.toggle_like(self.db, "hello", "v1"), (True, 1))
        # The second request checked for an existing like before the first stored it.
        with patch.object(self.db, "find_one", side_effect=[self.post, None]):
            self.assertEqual(blog.toggle_like(self.db, "hello", "v1"), (True, 1))
        self.assertEqual(len(self.db.list(BlogLike, blog_id=self.post.id)), 1)
        self.assertEqual(self.db.get(BlogPost, self.post.id).like_count, 1)


class MediaTests(unittest.TestCase):
    def test_size_limit(self):
        storage = InMemoryStorageClient()
        too_big = b"x" * (media.MAX_UPLOAD_BYTES + 1)
        with self.assertRaises(ValidationFailed):
            media.upload_media(storage, "profile", "me.jpg", too_big, "image/jpeg")
        self.assertEqual(storage.stored_objects, {})

    def test_resume_accepts_documents(self):
        storage = InMemoryStorageClient()
        path, url = media.upload_media(storage, "resume", "cv.pdf", b"%PDF", "application/pdf")
        self.assertTrue(path.startswith("resume/resume_"))
        self.assertTrue(path.endswith(".pdf"))
        self.assertTrue(url.endswith(path))

    def test_sign_url_rejects_traversal(self):
        with self.assertRaises(ValidationFailed):
            media.sign_url(InMemoryStorageClient(), "../secrets.txt")


if __name__ == "__main__":
    unittest.main()

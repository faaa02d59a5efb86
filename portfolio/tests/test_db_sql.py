import unittest

from content.types import BlogLike, BlogPost, ContactSubmission, PageView, Project
from portfolio.db import DuplicateRecordError, SqlDbClient


class SqlDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL client logic.
    """

    def setUp(self):
        self.db = SqlDbClient("sqlite+pysqlite:///:memory:")

    def test_add_and_get(self):
        post = self.db.add(BlogPost(title="Hello", content="<p>x</p>", tags=["a", "b"]))
        fetched = self.db.get(BlogPost, post.id)
        self.assertEqual(fetched, post)
        self.assertEqual(fetched.tags, ["a", "b"])
        self.assertIsNone(self.db.get(BlogPost, "missing"))

    def test_list_filters_orders_and_limits(self):
        for order, category in ((2, "Web"), (0, "ML"), (1, "Web")):
            self.db.add(Project(title=f"p{order}", category=category, sort_order=order))

        ordered = self.db.list(Project, order_by="sort_order")
        self.assertEqual([p.title for p in ordered], ["p0", "p1", "p2"])

        web = self.db.list(Project, order_by="sort_order", descending=True, category="Web")
        self.assertEqual([p.title for p in web], ["p2", "p1"])

        self.assertEqual(len(self.db.list(Project, limit=1)), 1)
        self.assertEqual(self.db.find_one(Project, title="p1").sort_order, 1)

    def test_nulls_sort_last(self):
        self.db.add(BlogPost(title="draft", content="", published_at=None))
        self.db.add(BlogPost(title="old", content="", published_at=1.0))
        self.db.add(BlogPost(title="new", content="", published_at=2.0))
        posts = self.db.list(BlogPost, order_by="published_at", descending=True)
        self.assertEqual([p.title for p in posts], ["new", "old", "draft"])

    def test_update_and_increment(self):
        message = self.db.add(
            ContactSubmission(full_name="Ada", email="a@example.com", subject="Hi", message="Hello")
        )
        updated = self.db.update(ContactSubmission, message.id, {"tags": ["urgent"], "is_read": True})
        self.assertEqual(updated.tags, ["urgent"])
        self.assertTrue(updated.is_read)
        self.assertGreaterEqual(updated.updated_at, message.updated_at)
        self.assertIsNone(self.db.update(ContactSubmission, "missing", {"is_read": True}))

        with self.assertRaises(ValueError):
            self.db.update(ContactSubmission, message.id, {"nope": 1})

        post = self.db.add(BlogPost(title="Counted", content=""))
        self.db.increment(BlogPost, post.id, "view_count")
        self.assertEqual(self.db.increment(BlogPost, post.id, "view_count").view_count, 2)

    def test_delete_counts_removed_rows(self):
        views = [self.db.add(PageView(path=f"/{i}")) for i in range(3)]
        removed = self.db.delete(PageView, [views[0].id, views[1].id, "missing"])
        self.assertEqual(removed, 2)
        self.assertEqual([v.id for v in self.db.list(PageView)], [views[2].id])
        self.assertEqual(self.db.delete(PageView, []), 0)

    def test_one_like_per_visitor(self):
        self.db.add(BlogLike(blog_id="b1", visitor_id="v1"))
        with self.assertRaises(DuplicateRecordError):
            self.db.add(BlogLike(blog_id="b1", visitor_id="v1"))
        self.db.add(BlogLike(blog_id="b2", visitor_id="v1"))
        self.assertEqual(len(self.db.list(BlogLike, visitor_id="v1")), 2)


if __name__ == "__main__":
    unittest.main()

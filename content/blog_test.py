import unittest

from content import blog
from content.types import BlogPost


def _post(title, tags, content="<p>body</p>", excerpt="", published_at=0.0):
    return BlogPost(
        title=title,
        content=content,
        excerpt=excerpt,
        tags=tags,
        published=True,
        published_at=published_at,
    )


class BlogHelpersTest(unittest.TestCase):

    def setUp(self):
        self.python = _post("Python Tips", ["python", "tips"], published_at=3)
        self.rust = _post(
            "Rust Intro", ["rust"], content="<h2>Ownership</h2><p>borrow checker</p>", published_at=2
        )
        self.both = _post("Polyglot", ["python", "rust"], excerpt="Two languages", published_at=1)
        self.posts = [self.python, self.rust, self.both]

    def test_html_to_text(self):
        self.assertEqual(
            blog.html_to_text("<h2>Hi</h2><p>there <b>you</b></p><script>x()</script>"),
            "Hi there you",
        )

    def test_reading_time(self):
        self.assertEqual(blog.reading_time(""), 1)
        self.assertEqual(blog.reading_time("<p>" + "word " * 401 + "</p>"), 3)

    def test_make_excerpt_cuts_on_word_boundary(self):
        excerpt = blog.make_excerpt("<p>" + "alpha beta " * 50 + "</p>", limit=30)
        self.assertTrue(excerpt.endswith("..."))
        self.assertLessEqual(len(excerpt), 30)
        self.assertFalse(excerpt[:-3].endswith(" "))

    def test_collect_tags_keeps_first_seen_order(self):
        self.assertEqual(blog.collect_tags(self.posts), ["python", "tips", "rust"])

    def test_filter_by_query_matches_title_excerpt_and_content(self):
        self.assertEqual(blog.filter_posts(self.posts, "TIPS"), [self.python])
        self.assertEqual(blog.filter_posts(self.posts, "languages"), [self.both])
        self.assertEqual(blog.filter_posts(self.posts, "borrow"), [self.rust])

    def test_filter_query_ignores_markup(self):
        self.assertEqual(blog.filter_posts(self.posts, "h2"), [])

    def test_filter_requires_every_selected_tag(self):
        self.assertEqual(blog.filter_posts(self.posts, tags=["python"]), [self.python, self.both])
        self.assertEqual(blog.filter_posts(self.posts, tags=["python", "rust"]), [self.both])

    def test_filter_without_criteria_returns_everything(self):
        self.assertEqual(blog.filter_posts(self.posts, "  ", []), self.posts)

    def test_toggle_tag(self):
        self.assertEqual(blog.toggle_tag(["a"], "b"), ["a", "b"])
        self.assertEqual(blog.toggle_tag(["a", "b"], "a"), ["b"])

    def test_related_posts_ranked_by_overlap(self):
        related = blog.related_posts(self.both, self.posts)
        self.assertEqual(related, [self.python, self.rust])

    def test_related_posts_skip_self_and_drafts(self):
        draft = _post("Draft", ["python"])
        draft.published = False
        related = blog.related_posts(self.python, self.posts + [draft])
        self.assertEqual(related, [self.both])


if __name__ == "__main__":
    unittest.main()

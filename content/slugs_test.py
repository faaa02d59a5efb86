import unittest

from content.slugs import generate_unique_slug, is_valid_slug, slugify


class SlugifyTest(unittest.TestCase):

    def test_basic_title(self):
        self.assertEqual(slugify("Hello World"), "hello-world")

    def test_strips_accents_and_symbols(self):
        self.assertEqual(slugify("  Café Déjà Vu! (2024) "), "cafe-deja-vu-2024")

    def test_collapses_separators(self):
        self.assertEqual(slugify("a__b  --  c"), "a-b-c")

    def test_strips_edge_hyphens(self):
        self.assertEqual(slugify("--Rust & Go--"), "rust-go")

    def test_empty_input(self):
        self.assertEqual(slugify(""), "")
        self.assertEqual(slugify(None), "")

    def test_truncates_long_titles(self):
        self.assertEqual(len(slugify("a" * 500)), 200)


class UniqueSlugTest(unittest.TestCase):

    def test_unused_slug_is_returned_as_is(self):
        self.assertEqual(generate_unique_slug("My Post", ["other"]), "my-post")

    def test_appends_counter_until_free(self):
        existing = ["my-post", "my-post-1", "my-post-2"]
        self.assertEqual(generate_unique_slug("My Post", existing), "my-post-3")

    def test_counter_is_based_on_original_slug(self):
        self.assertEqual(generate_unique_slug("My Post", ["my-post"]), "my-post-1")


class ValidSlugTest(unittest.TestCase):

    def test_valid(self):
        self.assertTrue(is_valid_slug("hello-world-2"))

    def test_invalid(self):
        for value in ["", "Hello", "hello--world", "-hello", "hello-", "hé"]:
            with self.subTest(value=value):
                self.assertFalse(is_valid_slug(value))


if __name__ == "__main__":
    unittest.main()

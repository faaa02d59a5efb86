import unittest

from content.toc import generate_table_of_contents, heading_id, inject_heading_ids

ARTICLE = """
<h3>Orphan</h3>
<h2>Getting Started</h2>
<p>Intro</p>
<h3>Install <code>pip</code></h3>
<h4>On Linux</h4>
<h2>Q &amp; A</h2>
"""


class TableOfContentsTest(unittest.TestCase):

    def test_heading_id(self):
        self.assertEqual(heading_id("Getting Started!"), "getting-started")
        self.assertEqual(heading_id("Install <code>pip</code>"), "install-pip")
        self.assertEqual(heading_id("Q &amp; A"), "q-amp-a")

    def test_nests_under_previous_h2(self):
        toc = generate_table_of_contents(ARTICLE)
        self.assertEqual([item.title for item in toc], ["Getting Started", "Q & A"])
        children = toc[0].children
        self.assertEqual([child.id for child in children], ["install-pip", "on-linux"])
        self.assertEqual([child.level for child in children], [3, 4])
        self.assertEqual(toc[1].id, "q-amp-a")

    def test_drops_deep_headings_before_first_h2(self):
        toc = generate_table_of_contents(ARTICLE)
        titles = [item.title for item in toc] + [
            child.title for item in toc for child in item.children
        ]
        self.assertNotIn("Orphan", titles)

    def test_empty_content(self):
        self.assertEqual(generate_table_of_contents(""), [])

    def test_inject_heading_ids_matches_toc(self):
        html = inject_heading_ids(ARTICLE)
        for item in generate_table_of_contents(ARTICLE):
            self.assertIn(f'id="{item.id}"', html)
        self.assertIn('<h3 id="install-pip">Install <code>pip</code></h3>', html)

    def test_inject_replaces_existing_id_and_keeps_attrs(self):
        html = inject_heading_ids('<h2 class="x" id="old">New Title</h2>')
        self.assertEqual(html, '<h2 class="x" id="new-title">New Title</h2>')


if __name__ == "__main__":
    unittest.main()

"""Tests for regex clean-up passes."""

from republish.markup.cleanup import (
    strip_comments,
    strip_empty_paragraphs,
    strip_presentation_attributes,
)


class TestStripComments:
    def test_single_line(self):
        assert strip_comments("a<!-- x -->b") == "ab"

    def test_multi_line_non_greedy(self):
        text = "<!-- wp:paragraph -->\n<p>a</p>\n<!-- /wp:paragraph -->keep<!--\nx\n-->"
        assert strip_comments(text) == "\n<p>a</p>\nkeep"

    def test_nothing_to_strip(self):
        assert strip_comments("<p>a</p>") == "<p>a</p>"


class TestStripEmptyParagraphs:
    def test_removes_only_empty(self):
        assert strip_empty_paragraphs("<p></p><p>a</p><p> </p>") == "<p>a</p><p> </p>"


class TestStripPresentationAttributes:
    def test_removes_class_srcset_sizes(self):
        html = (
            '<img class="wp-image-7 big" src="a.jpg" '
            'srcset="a-300.jpg 300w, a-600.jpg 600w" sizes="(max-width: 600px) 100vw"/>'
        )
        assert strip_presentation_attributes(html) == '<img src="a.jpg"/>'

    def test_keeps_other_attributes(self):
        assert strip_presentation_attributes('<p id="x">a</p>') == '<p id="x">a</p>'

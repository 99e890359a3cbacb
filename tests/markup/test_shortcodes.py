"""Tests for shortcode stripping."""

from republish.config import DEFAULT_SHORTCODES
from republish.markup.shortcodes import strip_shortcodes


class TestStripShortcodes:
    def test_self_closing(self):
        assert strip_shortcodes('a [gallery ids="1,2"] b', DEFAULT_SHORTCODES) == "a  b"

    def test_explicit_self_closing(self):
        assert strip_shortcodes("a [audio src=\"x.mp3\" /] b", DEFAULT_SHORTCODES) == "a  b"

    def test_enclosing_removes_content(self):
        text = 'before [caption id="c1"]<img src="a.jpg"/> Caption[/caption] after'
        assert strip_shortcodes(text, DEFAULT_SHORTCODES) == "before  after"

    def test_escaped_shortcode_is_unwrapped(self):
        assert strip_shortcodes("[[gallery]]", DEFAULT_SHORTCODES) == "[gallery]"

    def test_unregistered_brackets_survive(self):
        text = "[note] keep [this] and [gallery-extra]"
        assert strip_shortcodes(text, DEFAULT_SHORTCODES) == text

    def test_custom_registry(self):
        assert strip_shortcodes("x [pullquote]y[/pullquote] z", ["pullquote"]) == "x  z"

    def test_no_registry(self):
        assert strip_shortcodes("[gallery]", []) == "[gallery]"

    def test_no_brackets(self):
        assert strip_shortcodes("plain", DEFAULT_SHORTCODES) == "plain"

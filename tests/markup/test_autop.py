"""Tests for automatic paragraph wrapping."""

from republish.markup.autop import autop


class TestAutop:
    def test_wraps_plain_text(self):
        assert autop("Hello") == "<p>Hello</p>\n"

    def test_blank_lines_split_paragraphs(self):
        assert autop("One\n\nTwo") == "<p>One</p>\n\n<p>Two</p>\n"

    def test_single_newline_becomes_br(self):
        assert autop("One\nTwo") == "<p>One<br />\nTwo</p>\n"

    def test_br_disabled(self):
        assert autop("One\nTwo", br=False) == "<p>One\nTwo</p>\n"

    def test_existing_br_not_doubled(self):
        assert autop("One<br/>\nTwo") == "<p>One<br/>\nTwo</p>\n"

    def test_block_elements_not_wrapped(self):
        text = "<p>World</p>\n\n<figure><img src=\"a.jpg\"/></figure>\n\nTail"
        assert autop(text) == (
            "<p>World</p>\n\n<figure><img src=\"a.jpg\"/></figure>\n\n<p>Tail</p>\n"
        )

    def test_double_br_splits_paragraphs(self):
        assert autop("One<br><br>Two") == "<p>One</p>\n\n<p>Two</p>\n"

    def test_windows_newlines(self):
        assert autop("One\r\n\r\nTwo") == "<p>One</p>\n\n<p>Two</p>\n"

    def test_blank_input(self):
        assert autop("") == ""
        assert autop("  \n\n ") == ""


class TestAutopBlocks:
    def test_blank_lines_inside_div(self):
        assert autop("<div>\n\nText\n\n</div>") == "<div>\n\n<p>Text</p>\n\n</div>\n"

    def test_blockquote_paragraphs(self):
        assert autop("<blockquote>A\n\nB</blockquote>") == (
            "<blockquote>\n\n<p>A</p>\n\n<p>B</p>\n\n</blockquote>\n"
        )

    def test_single_line_block_untouched(self):
        assert autop("<div>One\nTwo</div>") == "<div>One\nTwo</div>\n"

    def test_pre_contents_preserved(self):
        assert autop("<pre>a = 1\n\nb = 2</pre>") == "<pre>a = 1\n\nb = 2</pre>\n"

    def test_pre_gets_no_br(self):
        assert autop("Code:\n\n<pre class=\"py\">x\ny</pre>") == (
            "<p>Code:</p>\n\n<pre class=\"py\">x\ny</pre>\n"
        )

    def test_paragraph_with_blank_line_not_nested(self):
        assert autop("<p>A\n\nB</p>") == "<p>A\n\nB</p>\n"

    def test_text_before_block(self):
        assert autop("Intro <div>x</div>") == "<p>Intro</p>\n\n<div>x</div>\n"

    def test_nested_containers(self):
        text = "<div><blockquote>A\n\nB</blockquote>\n\nTail\n\n</div>"
        assert autop(text) == (
            "<div><blockquote>\n\n<p>A</p>\n\n<p>B</p>\n\n</blockquote>"
            "\n\n<p>Tail</p>\n\n</div>\n"
        )

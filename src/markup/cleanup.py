"""Regex clean-up passes over HTML strings."""

from __future__ import annotations

import re

_COMMENT_RE = re.compile(r"<!--.*?-->", re.IGNORECASE | re.DOTALL)
_PRESENTATION_ATTR_RE = re.compile(r' (?:class|srcset|sizes)=".*?"')
_EMPTY_PARAGRAPH = "<p></p>"


def strip_comments(html: str) -> str:
    """Remove every ``<!-- ... -->`` comment, including multi-line ones."""
    return _COMMENT_RE.sub("", html)


def strip_empty_paragraphs(html: str) -> str:
    return html.replace(_EMPTY_PARAGRAPH, "")


def strip_presentation_attributes(html: str) -> str:
    """Drop every ``class``, ``srcset`` and ``sizes`` attribute."""
    return _PRESENTATION_ATTR_RE.sub("", html)

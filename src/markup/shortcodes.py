"""WordPress-style shortcode stripping."""

from __future__ import annotations

import re
from collections.abc import Iterable


def shortcode_regex(tags: Iterable[str]) -> re.Pattern[str]:
    """Build the pattern matching any of the registered shortcode ``tags``.

    Groups:
        1. optional ``[`` escaping the shortcode
        2. shortcode name
        3. attribute string
        4. self-closing ``/``
        5. enclosed content
        6. optional ``]`` escaping the shortcode
    """
    names = "|".join(re.escape(tag) for tag in tags)
    return re.compile(
        r"\[(\[?)"
        rf"({names})"
        r"(?![\w-])"
        r"([^\]/]*(?:/(?!\])[^\]/]*)*?)"
        r"(?:(/)\]|\](?:([^\[]*(?:\[(?!/\2\])[^\[]*)*)\[/\2\])?)"
        r"(\]?)"
    )


def _strip_match(match: re.Match[str]) -> str:
    # [[tag]] is an escaped shortcode: keep it, minus one pair of brackets.
    if match.group(1) == "[" and match.group(6) == "]":
        return match.group(0)[1:-1]
    return match.group(1) + match.group(6)


def strip_shortcodes(text: str, tags: Iterable[str]) -> str:
    """Remove registered shortcodes, including any content they enclose.

    Brackets that do not name a registered shortcode are left alone.
    """
    tags = [t for t in tags if t]
    if not tags or "[" not in text:
        return text
    return shortcode_regex(tags).sub(_strip_match, text)

"""Automatic paragraph wrapping for plain-text-ish article bodies."""

from __future__ import annotations

import re

_BLOCK_TAGS = (
    "table|thead|tfoot|caption|col|colgroup|tbody|tr|td|th|div|dl|dd|dt|ul|ol|li|pre"
    "|form|map|area|blockquote|address|math|style|p|h[1-6]|hr|fieldset|legend|section"
    "|article|aside|hgroup|header|footer|nav|figure|figcaption|details|menu|summary"
)
# <pre> blocks are matched whole so their contents are never touched.
_BLOCK_TOKEN_RE = re.compile(
    rf"(<pre[\s>].*?</pre>|</?(?:{_BLOCK_TAGS})(?:\s[^>]*)?/?>)",
    re.IGNORECASE | re.DOTALL,
)
_TAG_NAME_RE = re.compile(r"</?([a-z0-9]+)", re.IGNORECASE)
_BR_PAIR_RE = re.compile(r"<br\s*/?>\s*<br\s*/?>", re.IGNORECASE)
_BLANK_LINE_RE = re.compile(r"\n\s*\n")
_NEWLINE_RE = re.compile(r"(?<!<br />)(?<!<br/>)(?<!<br>)[ \t]*\n")

# Blocks whose loose text is split into paragraphs when it spans blank lines.
_PARAGRAPH_CONTAINERS = frozenset({
    "article", "aside", "blockquote", "dd", "details", "div", "fieldset",
    "footer", "form", "header", "li", "nav", "section", "td", "th",
})
_VOID_BLOCKS = frozenset({"area", "col", "hr"})


def _track(stack: list[str], token: str) -> None:
    """Update the open-block stack with one block token."""
    name = _TAG_NAME_RE.match(token).group(1).lower()
    if token.startswith("</"):
        if name in stack:
            while stack.pop() != name:
                pass
        return
    if name in _VOID_BLOCKS or token.endswith("/>") or token.lower().endswith("</pre>"):
        return
    stack.append(name)


def _should_wrap(run: str, container: str | None) -> bool:
    if container is None:
        return True
    return container in _PARAGRAPH_CONTAINERS and bool(_BLANK_LINE_RE.search(run))


def _paragraphs(run: str, br: bool) -> str:
    paragraphs = []
    for chunk in _BLANK_LINE_RE.split(run.strip()):
        chunk = chunk.strip()
        if not chunk:
            continue
        if br:
            chunk = _NEWLINE_RE.sub("<br />\n", chunk)
        paragraphs.append(f"<p>{chunk}</p>")
    return "\n\n" + "\n\n".join(paragraphs) + "\n\n"


def autop(text: str, br: bool = True) -> str:
    """Wrap loose text of ``text`` in ``<p>`` tags.

    Top-level text is split into paragraphs on blank lines. Text inside a
    container block (``div``, ``blockquote``, ...) is wrapped only when it
    spans a blank line. Text inside ``p``, headings, ``figure`` and the like
    is left alone, and ``<pre>`` contents are never changed. With ``br`` set,
    single newlines inside a new paragraph become ``<br />``.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        return ""

    text = _BR_PAIR_RE.sub("\n\n", text)

    pieces: list[str] = []
    stack: list[str] = []
    for index, part in enumerate(_BLOCK_TOKEN_RE.split(text)):
        if index % 2:
            piece = part
            _track(stack, part)
        elif not part.strip():
            piece = "\n\n" if _BLANK_LINE_RE.search(part) else part
        elif _should_wrap(part, stack[-1] if stack else None):
            piece = _paragraphs(part, br)
        else:
            piece = part

        if pieces and piece.startswith("\n\n") and pieces[-1].endswith("\n\n"):
            piece = piece[2:]
        pieces.append(piece)

    return "".join(pieces).strip() + "\n"

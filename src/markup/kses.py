"""Whitelist HTML sanitizer.

Tags outside the whitelist are unwrapped: their markup goes, their text
stays. Attributes outside a tag's whitelist are dropped, as are URI
attributes using a protocol we do not allow.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

AllowedTags = dict[str, frozenset[str]]

ALLOWED_PROTOCOLS = frozenset({
    "http", "https", "ftp", "ftps", "mailto", "news", "irc", "irc6", "ircs",
    "gopher", "nntp", "feed", "telnet", "mms", "rtsp", "sms", "svn", "tel",
    "fax", "xmpp", "webcal", "urn",
})

URI_ATTRIBUTES = frozenset({
    "action", "cite", "classid", "codebase", "data", "href", "longdesc",
    "poster", "profile", "src", "usemap", "xmlns",
})

GLOBAL_ATTRIBUTES = frozenset({
    "aria-controls", "aria-current", "aria-describedby", "aria-details",
    "aria-expanded", "aria-hidden", "aria-label", "aria-labelledby",
    "aria-live", "class", "data-*", "dir", "hidden", "id", "lang", "style",
    "title", "role", "xml:lang",
})

_CELL = ("abbr", "align", "axis", "bgcolor", "char", "charoff", "colspan",
         "headers", "height", "nowrap", "rowspan", "scope", "valign", "width")
_COLUMN = ("align", "char", "charoff", "span", "valign", "width")
_ROW_GROUP = ("align", "char", "charoff", "valign")

_POST_TAGS: dict[str, tuple[str, ...]] = {
    "address": (),
    "a": ("href", "rel", "rev", "name", "target", "download", "referrerpolicy"),
    "abbr": (),
    "acronym": (),
    "area": ("alt", "coords", "href", "nohref", "shape", "target"),
    "article": ("align",),
    "aside": ("align",),
    "audio": ("autoplay", "controls", "loop", "muted", "preload", "src"),
    "b": (),
    "bdo": (),
    "big": (),
    "blockquote": ("cite",),
    "br": (),
    "button": ("disabled", "name", "type", "value"),
    "caption": ("align",),
    "cite": (),
    "code": (),
    "col": _COLUMN,
    "colgroup": _COLUMN,
    "del": ("datetime",),
    "dd": (),
    "dfn": (),
    "details": ("align", "open"),
    "div": ("align",),
    "dl": (),
    "dt": (),
    "em": (),
    "fieldset": (),
    "figure": ("align",),
    "figcaption": ("align",),
    "font": ("color", "face", "size"),
    "footer": ("align",),
    "form": ("action", "accept", "accept-charset", "enctype", "method", "name", "target"),
    "h1": ("align",),
    "h2": ("align",),
    "h3": ("align",),
    "h4": ("align",),
    "h5": ("align",),
    "h6": ("align",),
    "header": ("align",),
    "hgroup": ("align",),
    "hr": ("align", "noshade", "size", "width"),
    "i": (),
    "img": ("alt", "align", "border", "height", "hspace", "loading", "longdesc",
            "vspace", "src", "usemap", "width", "decoding", "srcset", "sizes"),
    "ins": ("datetime", "cite"),
    "kbd": (),
    "label": ("for",),
    "legend": ("align",),
    "li": ("align", "value"),
    "main": ("align",),
    "map": ("name",),
    "mark": (),
    "menu": ("type",),
    "nav": ("align",),
    "object": ("data", "type"),
    "ol": ("start", "type", "reversed"),
    "p": ("align",),
    "pre": ("width",),
    "q": ("cite",),
    "rb": (),
    "rp": (),
    "rt": (),
    "rtc": (),
    "ruby": (),
    "s": (),
    "samp": (),
    "span": ("align",),
    "section": ("align",),
    "small": (),
    "strike": (),
    "strong": (),
    "sub": (),
    "summary": ("align",),
    "sup": (),
    "table": ("align", "bgcolor", "border", "cellpadding", "cellspacing", "rules",
              "summary", "width"),
    "tbody": _ROW_GROUP,
    "td": _CELL,
    "textarea": ("cols", "rows", "disabled", "name", "readonly"),
    "tfoot": _ROW_GROUP,
    "th": _CELL,
    "thead": _ROW_GROUP,
    "title": (),
    "tr": ("align", "bgcolor", "char", "charoff", "valign"),
    "track": ("default", "kind", "label", "src", "srclang"),
    "tt": (),
    "u": (),
    "ul": ("type",),
    "var": (),
    "video": ("autoplay", "controls", "height", "loop", "muted", "playsinline",
              "poster", "preload", "src", "width"),
}

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x20]+")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_UNSAFE_STYLE_RE = re.compile(r"expression\s*\(|javascript:|behavior\s*:", re.IGNORECASE)
_NON_CONTENT_NODES = (Comment, Declaration, Doctype, ProcessingInstruction)


def default_post_tags() -> AllowedTags:
    """The site's default whitelist for post content, global attributes included."""
    return {tag: frozenset(attrs) | GLOBAL_ATTRIBUTES for tag, attrs in _POST_TAGS.items()}


def default_allowed_tags() -> AllowedTags:
    """Default whitelist for republished content: post tags without ``form``."""
    tags = default_post_tags()
    tags.pop("form", None)
    return tags


def normalize_allowed_tags(allowed: Mapping[str, Iterable[str]]) -> AllowedTags:
    """Lower-case a ``tag -> attributes`` mapping into an AllowedTags dict."""
    return {
        tag.lower(): frozenset(attr.lower() for attr in attrs)
        for tag, attrs in allowed.items()
    }


def has_bad_protocol(value: str) -> bool:
    """Whether a URI attribute value uses a protocol outside ALLOWED_PROTOCOLS."""
    match = _SCHEME_RE.match(_CONTROL_CHARS_RE.sub("", value))
    return bool(match) and match.group(1).lower() not in ALLOWED_PROTOCOLS


def _attribute_allowed(name: str, allowed: frozenset[str]) -> bool:
    if name in allowed:
        return True
    return name.startswith("data-") and "data-*" in allowed


def _filter_attributes(attrs: dict, allowed: frozenset[str]) -> dict[str, str]:
    kept: dict[str, str] = {}
    for name, value in attrs.items():
        key = name.lower()
        if not _attribute_allowed(key, allowed):
            continue
        if isinstance(value, list):
            value = " ".join(value)
        if key in URI_ATTRIBUTES and has_bad_protocol(value):
            continue
        if key == "style" and _UNSAFE_STYLE_RE.search(value):
            continue
        kept[name] = value
    return kept


def kses(html: str, allowed_tags: Mapping[str, Iterable[str]]) -> str:
    """Filter ``html`` down to ``allowed_tags``.

    Args:
        html: Untrusted markup.
        allowed_tags: ``tag -> allowed attribute names``. A ``data-*`` entry
            allows every ``data-`` attribute on that tag.

    Returns:
        The sanitized markup. Disallowed elements are unwrapped, so their
        text content survives.
    """
    if not html:
        return ""

    allowed = normalize_allowed_tags(allowed_tags)
    soup = BeautifulSoup(html, "html.parser")

    for node in soup.find_all(string=lambda s: isinstance(s, _NON_CONTENT_NODES)):
        node.extract()

    for tag in soup.find_all(True):
        name = tag.name.lower()
        if name not in allowed:
            tag.unwrap()
            continue
        tag.attrs = _filter_attributes(tag.attrs, allowed[name])

    return str(soup)

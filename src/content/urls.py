"""URL → article lookup and republish link building."""

from __future__ import annotations

import logging
import re
from urllib.parse import parse_qs, urlsplit

from republish.content.models import ContentItem
from republish.content.store import ContentStore

logger = logging.getLogger(__name__)

# Routers collapse "//" in paths, so "https://host/..." often arrives as "https:/host/...".
_COLLAPSED_SCHEME_RE = re.compile(r"^(https?):/(?!/)", re.IGNORECASE)
_ID_QUERY_KEYS = ("p", "page_id")


def bare_host(netloc: str) -> str:
    """Lower-cased host of a netloc, without credentials or a leading "www."."""
    host = netloc.lower().rsplit("@", 1)[-1]
    return host[4:] if host.startswith("www.") else host


def parse_item_id(value: str) -> int | None:
    """Article id from an ASCII decimal string, or None."""
    value = value.strip()
    if value.isascii() and value.isdigit():
        return int(value)
    return None


def url_to_item_id(url: str, store: ContentStore, site_url: str) -> int | None:
    """Resolve a URL, path or slug to an article id.

    Accepts a full permalink, a permalink missing its scheme, a site-relative
    path, a bare slug, or the ``?p=<id>`` query form. URLs pointing at another
    host never resolve.

    Returns:
        The article id, or None when nothing matches.
    """
    candidate = (url or "").strip()
    if not candidate:
        return None

    site = urlsplit(site_url)
    candidate = _COLLAPSED_SCHEME_RE.sub(r"\1://", candidate)
    if "://" not in candidate and site.netloc:
        head = candidate.split("/", 1)[0]
        if bare_host(head) == bare_host(site.netloc):
            candidate = f"{site.scheme or 'http'}://{candidate}"

    try:
        parts = urlsplit(candidate)
    except ValueError:
        logger.debug("Unparsable republish URL %r", url)
        return None

    if parts.netloc and bare_host(parts.netloc) != bare_host(site.netloc):
        return None

    query = parse_qs(parts.query)
    for key in _ID_QUERY_KEYS:
        values = query.get(key)
        item_id = parse_item_id(values[0]) if values else None
        if item_id is not None:
            return item_id if store.exists(item_id) else None

    path = parts.path.strip("/")
    if not path:
        return None

    item = store.find_by_path(path)
    base = site.path.strip("/")
    if item is None and base:
        item = store.find_by_path(f"{base}/{path}")
    if item is None:
        item = store.find_by_slug(path.rsplit("/", 1)[-1])
    return item.id if item else None


def republish_url(item: ContentItem, site_url: str, endpoint: str) -> str:
    """Public link to the republish page of an article."""
    base = f"{site_url.rstrip('/')}/{endpoint.strip('/')}"
    if item.path:
        return f"{base}/{item.path}/"
    return f"{base}/?p={item.id}"

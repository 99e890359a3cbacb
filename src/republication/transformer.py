"""Builds the HTML snippet readers copy when republishing an article."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from republish.config import RepublishConfig
from republish.content.models import ContentItem
from republish.content.store import ContentStore
from republish.errors import InvalidContentIdError
from republish.markup import (
    autop,
    default_allowed_tags,
    kses,
    strip_comments,
    strip_empty_paragraphs,
    strip_presentation_attributes,
    strip_shortcodes,
)
from republish.markup.kses import AllowedTags, normalize_allowed_tags
from republish.republication.elements import canonical_link, image_tag
from republish.republication.hooks import RepublishHooks

logger = logging.getLogger(__name__)

_WP_IMAGE_RE = re.compile(r'<img[^>]+class="[^"]*\bwp-image-(\d+)\b[^"]*"[^>]*>')


class ImageAttribution(Protocol):
    """Tells whether an image asset may be redistributed."""

    def can_distribute(self, image_id: int) -> bool: ...


def format_publish_date(published_at: datetime, timezone_name: str = "UTC") -> str:
    """Format an instant as ``"Jan 15 3:04pm EST"`` in the given timezone.

    An empty or unknown timezone falls back to UTC.
    """
    try:
        tz = ZoneInfo(timezone_name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", timezone_name)
        tz = ZoneInfo("UTC")

    local = published_at.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{local:%b} {local.day} {hour}:{local:%M}{meridiem} {local.tzname()}"


class ContentTransformer:
    """Turns a stored article into a self-contained, sanitized HTML fragment.

    Args:
        store: Article and media source.
        config: Site configuration (whitelist override, timezone, subtitle key).
        attribution: Optional image attribution source. Without one, no image
            is ever redacted.
        hooks: Extension callables; identity when unset.
        footer: Produces the attribution footer for an article. Its output is
            expected to be entity-encoded and is decoded before insertion.
    """

    def __init__(
        self,
        store: ContentStore,
        config: RepublishConfig,
        *,
        attribution: ImageAttribution | None = None,
        hooks: RepublishHooks | None = None,
        footer: Callable[[ContentItem], str] | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._attribution = attribution
        self._hooks = hooks or RepublishHooks()
        self._footer = footer

    def allowed_tags(self, item: ContentItem) -> AllowedTags:
        """Whitelist for ``item``: the configured override or the default, then the hook."""
        override = self._config.republish.allowed_tags
        if override is not None:
            tags = normalize_allowed_tags(override)
        else:
            tags = default_allowed_tags()
        return self._hooks.allowed_tags(tags, item)

    def prepare_body(self, item: ContentItem) -> str:
        """Run the body through shortcode/comment stripping, kses, autop and redaction."""
        content = item.body
        if self._hooks.strip_shortcodes is not None:
            content = self._hooks.strip_shortcodes(content, item)
        else:
            content = strip_shortcodes(content, self._config.republish.shortcodes)

        content = strip_comments(content)
        content = kses(content, self.allowed_tags(item))
        content = strip_empty_paragraphs(autop(content))

        if self._attribution is not None:
            content = self.redact_images(content)

        return self._hooks.content(content, item)

    def redact_images(self, content: str) -> str:
        """Remove ``<figure>`` blocks around images that may not be redistributed.

        Images that are not the first element of a figure are left in place.
        """
        if self._attribution is None:
            return content

        blocked: list[str] = []
        for match in _WP_IMAGE_RE.finditer(content):
            image_id = int(match.group(1))
            if self._attribution.can_distribute(image_id):
                continue
            if match.group(0) not in blocked:
                blocked.append(match.group(0))
            logger.debug("Image %d may not be redistributed", image_id)

        for markup in blocked:
            pattern = re.compile(
                r"<figure[^>]*>\s*" + re.escape(markup) + r".*?</figure>", re.DOTALL
            )
            content = pattern.sub("", content)
        return content

    def featured_image(self, item: ContentItem) -> str:
        """Featured image markup, or "" when missing or not distributable."""
        image_id = item.featured_image_id
        if image_id is None:
            return ""
        if self._attribution is not None and not self._attribution.can_distribute(image_id):
            logger.debug("Omitting featured image %d of article %d", image_id, item.id)
            return ""
        image = self._store.get_image(image_id)
        if image is None:
            return ""
        return image_tag(image)

    def build_snippet(self, item_id: int) -> str:
        """Assemble the republishable HTML for an article.

        Raises:
            InvalidContentIdError: If the article does not exist.
        """
        item = self._store.get(item_id)
        if item is None:
            raise InvalidContentIdError(item_id)

        body = self.prepare_body(item)
        subtitle = str(item.meta.get(self._config.republish.subtitle_meta_key) or "")
        byline = self._hooks.author_byline(item.byline, item)
        published = format_publish_date(item.published_at, self._config.site.timezone)
        # Footers arrive entity-encoded and are decoded whole, placeholder values included.
        footer = html.unescape(self._footer(item)) if self._footer else ""

        blocks = [
            f"<h1>{html.escape(item.title)}</h1>" if item.title else "",
            f"<h2>{html.escape(subtitle)}</h2>" if subtitle else "",
            f"<div>{byline}</div>" if byline else "",
            f"<time>{html.escape(published)}</time>" if published else "",
            self.featured_image(item),
            body.strip(),
            canonical_link(item.canonical_url) if item.canonical_url else "",
            footer.strip(),
        ]
        markup = "\n\n".join(block for block in blocks if block)
        markup = strip_presentation_attributes(markup)

        logger.debug("Built republish snippet for article %d", item.id)
        return self._hooks.article_markup(markup, item)

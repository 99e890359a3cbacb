"""Attribution footer appended to every republished article."""

from __future__ import annotations

import html
import logging
from urllib.parse import urlencode, urlsplit

from republish.config import RepublishConfig
from republish.content.models import ContentItem

logger = logging.getLogger(__name__)

PIXEL_PATH = "/republication-pixel"
PIXEL_ELEMENT_ID = "republication-tracker-tool-source"


class _Placeholders(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class ContentFooter:
    """Renders the configured footer template for an article.

    Placeholder values (``{title}``, ``{url}``, ``{site_name}``,
    ``{site_url}``) are entity-encoded. When tracking is enabled a 1x1
    pixel pointing back at this site is appended so republications can be
    counted.
    """

    def __init__(self, config: RepublishConfig) -> None:
        self._config = config

    @property
    def site_name(self) -> str:
        return self._config.site.name or urlsplit(self._config.site.url).netloc

    def pixel_url(self, item: ContentItem) -> str:
        params: dict[str, str | int] = {"post": item.id}
        if self._config.republish.analytics_id:
            params["ga"] = self._config.republish.analytics_id
        return f"{self._config.site.home_url}{PIXEL_PATH}?{urlencode(params)}"

    def __call__(self, item: ContentItem) -> str:
        values = _Placeholders(
            title=html.escape(item.title),
            url=html.escape(item.canonical_url),
            site_name=html.escape(self.site_name),
            site_url=html.escape(self._config.site.home_url),
        )
        template = self._config.republish.footer_template
        try:
            footer = template.format_map(values)
        except (ValueError, IndexError):
            logger.warning("Malformed footer template, using it verbatim")
            footer = template

        if self._config.republish.tracking_pixel:
            footer += (
                f'<img id="{PIXEL_ELEMENT_ID}" src="{html.escape(self.pixel_url(item))}"'
                ' style="width:1px;height:1px;">'
            )
        return footer

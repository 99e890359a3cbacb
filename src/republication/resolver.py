"""Maps ``/<endpoint>/<anything>`` requests onto articles.

The resolver only decides what should happen; the web layer turns the
outcome into a 404 page, a redirect or the republish page.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial

from pydantic import BaseModel, ConfigDict

from republish.config import RepublishConfig
from republish.content.store import ContentStore
from republish.content.urls import url_to_item_id
from republish.republication.elements import ROBOTS_META, canonical_link
from republish.republication.hooks import RepublishHooks

logger = logging.getLogger(__name__)

Lookup = Callable[[str], int | None]


class NotFound(BaseModel):
    """The path does not resolve to any article."""

    model_config = ConfigDict(frozen=True)


class RedirectToCanonical(BaseModel):
    """The article exists but may not be republished; send readers to it."""

    model_config = ConfigDict(frozen=True)

    url: str


class Render(BaseModel):
    """Show the republish page for ``item_id``."""

    model_config = ConfigDict(frozen=True)

    item_id: int
    canonical_url: str

    @property
    def head_markup(self) -> str:
        """Tags injected into the page head: canonical link and noindex."""
        return f"{canonical_link(self.canonical_url)}\n{ROBOTS_META}"


Outcome = NotFound | RedirectToCanonical | Render


class RewriteResolver:
    """Resolve the path after the republish endpoint to an outcome.

    Args:
        store: Article source.
        config: Site configuration (eligible post types, site URL).
        hooks: Optional ``post_types`` hook.
        lookup: URL → article id function. Defaults to
            :func:`~republish.content.urls.url_to_item_id` over ``store``.
    """

    def __init__(
        self,
        store: ContentStore,
        config: RepublishConfig,
        *,
        hooks: RepublishHooks | None = None,
        lookup: Lookup | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._hooks = hooks or RepublishHooks()
        self._lookup = lookup or partial(
            url_to_item_id, store=store, site_url=config.site.url
        )

    @property
    def eligible_post_types(self) -> list[str]:
        return self._hooks.post_types(list(self._config.republish.post_types))

    def resolve(self, path_suffix: str) -> Outcome:
        """Decide how to answer a request for ``path_suffix``.

        Never raises: a failing lookup counts as no match.
        """
        try:
            item_id = self._lookup(path_suffix)
        except Exception:
            logger.warning("URL lookup failed for %r", path_suffix, exc_info=True)
            item_id = None

        item = self._store.get(item_id) if item_id else None
        if item is None:
            logger.debug("No article for republish path %r", path_suffix)
            return NotFound()

        if item.republish_disabled:
            logger.info("Article %d opted out of republishing, redirecting", item.id)
            return RedirectToCanonical(url=item.canonical_url)

        if item.post_type not in self.eligible_post_types:
            logger.info(
                "Article %d has ineligible type %r, redirecting", item.id, item.post_type
            )
            return RedirectToCanonical(url=item.canonical_url)

        return Render(item_id=item.id, canonical_url=item.canonical_url)

"""Extension points of the republication pipeline.

Every filter hook receives the current value (plus the article, where there
is one) and returns the replacement value. Unset hooks pass values through.
The ``before_content`` and ``after_content`` hooks return page markup for an
article and add nothing by default.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from republish.content.models import ContentItem
from republish.markup.kses import AllowedTags


def _keep(value, *_context):
    return value


def _no_markup(_item):
    return ""


@dataclass
class RepublishHooks:
    """Callables injected into the resolver, the transformer and the web app."""

    endpoint: Callable[[str], str] = _keep
    post_types: Callable[[list[str]], list[str]] = _keep
    # None means the built-in shortcode stripper runs.
    strip_shortcodes: Callable[[str, ContentItem], str] | None = None
    allowed_tags: Callable[[AllowedTags, ContentItem], AllowedTags] = _keep
    content: Callable[[str, ContentItem], str] = _keep
    author_byline: Callable[[str, ContentItem], str] = _keep
    article_markup: Callable[[str, ContentItem], str] = _keep
    # Extra page markup around the republish box; not part of the snippet.
    before_content: Callable[[ContentItem], str] = _no_markup
    after_content: Callable[[ContentItem], str] = _no_markup

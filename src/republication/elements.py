"""Small HTML elements shared by the republish page and the snippet."""

from __future__ import annotations

from html import escape

from republish.content.models import ImageAsset

ROBOTS_META = '<meta name="robots" content="noindex, nofollow" />'
FEATURED_IMAGE_CLASS = "attachment-full size-full wp-post-image"


def canonical_link(url: str) -> str:
    return f'<link rel="canonical" href="{escape(url)}" />'


def image_tag(image: ImageAsset, css_class: str = FEATURED_IMAGE_CLASS) -> str:
    """Render a full-size ``<img>`` for a media asset."""
    attrs: list[tuple[str, str]] = []
    if image.width:
        attrs.append(("width", str(image.width)))
    if image.height:
        attrs.append(("height", str(image.height)))
    attrs.append(("src", image.url))
    attrs.append(("class", css_class))
    attrs.append(("alt", image.alt))
    attrs.append(("decoding", "async"))
    rendered = " ".join(f'{name}="{escape(value)}"' for name, value in attrs)
    return f"<img {rendered} />"

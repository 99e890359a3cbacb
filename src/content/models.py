"""Content domain models: pure Pydantic v2 data types.

Articles (``ContentItem``) and media assets (``ImageAsset``) are owned by
the content store; the republication pipeline treats them as read-only.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator


class ImageAsset(BaseModel):
    """A media library image, with its redistribution flag."""

    id: int
    url: str
    alt: str = ""
    width: int | None = None
    height: int | None = None
    caption: str = ""
    credit: str = ""
    can_distribute: bool = False


class ContentItem(BaseModel):
    """A publishable article.

    ``meta`` holds free-form post meta; the subtitle is read from it under
    the configured key.
    """

    id: int
    slug: str
    post_type: str = "post"
    title: str
    body: str = ""
    published_at: datetime
    byline: str = ""
    featured_image_id: int | None = None
    canonical_url: str
    republish_disabled: bool = False
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("published_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def path(self) -> str:
        """Canonical URL path without leading or trailing slashes."""
        return urlsplit(self.canonical_url).path.strip("/")


class ShareRecord(BaseModel):
    """How often an article was republished, and where."""

    item_id: int
    count: int = 0
    urls: list[str] = Field(default_factory=list)
    last_shared_at: datetime | None = None

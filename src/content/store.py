"""JSON-backed content store.

Persists articles, media assets and share counters in a single JSON file,
loaded on init and saved after every write operation.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from republish.content.models import ContentItem, ImageAsset, ShareRecord

logger = logging.getLogger(__name__)

STORE_FILENAME = ".republish-content-store.json"

# Alias to avoid shadowing by ContentStore.list method
_list = list


class _StoreData(BaseModel):
    """Internal wrapper for JSON serialization."""

    items: list[ContentItem] = Field(default_factory=list)
    images: list[ImageAsset] = Field(default_factory=list)
    shares: list[ShareRecord] = Field(default_factory=list)


class ContentStore:
    """JSON-backed store for articles and media assets.

    Loads the store file on init and saves after every mutation.
    """

    def __init__(self, directory: Path) -> None:
        self._path = Path(directory) / STORE_FILENAME
        self._data = self._load()

    @property
    def path(self) -> Path:
        return self._path

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _StoreData:
        if not self._path.exists():
            return _StoreData()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return _StoreData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt content store at %s, starting fresh", self._path)
            return _StoreData()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._data.model_dump_json(indent=2),
            encoding="utf-8",
        )

    def _find(self, item_id: int) -> ContentItem | None:
        for item in self._data.items:
            if item.id == item_id:
                return item
        return None

    def _require(self, item_id: int) -> ContentItem:
        item = self._find(item_id)
        if item is None:
            raise KeyError(item_id)
        return item

    def _find_share(self, item_id: int) -> ShareRecord | None:
        for share in self._data.shares:
            if share.item_id == item_id:
                return share
        return None

    # ── Write operations ─────────────────────────────────────────

    def upsert(self, item: ContentItem) -> None:
        """Insert or replace an article by id."""
        self._data.items = [i for i in self._data.items if i.id != item.id]
        self._data.items.append(item)
        self._save()

    def upsert_image(self, image: ImageAsset) -> None:
        """Insert or replace a media asset by id."""
        self._data.images = [i for i in self._data.images if i.id != image.id]
        self._data.images.append(image)
        self._save()

    def set_republish_disabled(self, item_id: int, disabled: bool) -> None:
        """Opt an article out of (or back into) republication.

        Raises KeyError if the id does not exist.
        """
        item = self._require(item_id)
        item.republish_disabled = disabled
        self._save()

    def record_share(self, item_id: int, url: str = "") -> ShareRecord:
        """Count one republication of an article, remembering where it happened.

        Raises KeyError if the id does not exist.
        """
        self._require(item_id)
        share = self._find_share(item_id)
        if share is None:
            share = ShareRecord(item_id=item_id)
            self._data.shares.append(share)
        share.count += 1
        share.last_shared_at = datetime.now(tz=UTC)
        if url and url not in share.urls:
            share.urls.append(url)
        self._save()
        return share

    # ── Read operations ──────────────────────────────────────────

    def get(self, item_id: int) -> ContentItem | None:
        """Return an article by id, or None if not found."""
        return self._find(item_id)

    def get_image(self, image_id: int) -> ImageAsset | None:
        """Return a media asset by id, or None if not found."""
        for image in self._data.images:
            if image.id == image_id:
                return image
        return None

    def get_shares(self, item_id: int) -> ShareRecord:
        """Return the share record for an article (zero if never shared)."""
        return self._find_share(item_id) or ShareRecord(item_id=item_id)

    def list(self, post_type: str | None = None) -> _list[ContentItem]:
        """Return articles, optionally filtered by post type."""
        results = self._data.items
        if post_type is not None:
            results = [i for i in results if i.post_type == post_type]
        return _list(results)

    def exists(self, item_id: int) -> bool:
        """Check whether an article with this id exists."""
        return self._find(item_id) is not None

    def find_by_path(self, path: str) -> ContentItem | None:
        """Return the article whose permalink path matches ``path``."""
        wanted = path.strip("/")
        if not wanted:
            return None
        for item in self._data.items:
            if item.path == wanted:
                return item
        return None

    def find_by_slug(self, slug: str) -> ContentItem | None:
        """Return the first article with this slug."""
        for item in self._data.items:
            if item.slug == slug:
                return item
        return None


class StoreAttribution:
    """Image attribution backed by the ``can_distribute`` flag of stored assets.

    Unknown assets are never distributable.
    """

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    def can_distribute(self, image_id: int) -> bool:
        image = self._store.get_image(image_id)
        return bool(image and image.can_distribute)

"""Content domain: articles, media assets and the JSON store behind them.

The republication pipeline only ever reads articles; the store also keeps
the per-article opt-out flag and the share counters fed by the tracking
pixel.
"""

from republish.content.models import ContentItem, ImageAsset, ShareRecord
from republish.content.store import ContentStore, StoreAttribution

__all__ = [
    "ContentItem",
    "ContentStore",
    "ImageAsset",
    "ShareRecord",
    "StoreAttribution",
]

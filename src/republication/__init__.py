"""Republication pipeline: route resolution and snippet building."""

from republish.republication.footer import ContentFooter
from republish.republication.hooks import RepublishHooks
from republish.republication.resolver import (
    NotFound,
    Outcome,
    RedirectToCanonical,
    Render,
    RewriteResolver,
)
from republish.republication.transformer import ContentTransformer, ImageAttribution

__all__ = [
    "ContentFooter",
    "ContentTransformer",
    "ImageAttribution",
    "NotFound",
    "Outcome",
    "RedirectToCanonical",
    "Render",
    "RepublishHooks",
    "RewriteResolver",
]

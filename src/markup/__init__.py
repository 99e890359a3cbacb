"""HTML helpers used to turn stored article markup into a republishable fragment."""

from republish.markup.autop import autop
from republish.markup.cleanup import (
    strip_comments,
    strip_empty_paragraphs,
    strip_presentation_attributes,
)
from republish.markup.kses import default_allowed_tags, default_post_tags, kses
from republish.markup.shortcodes import strip_shortcodes

__all__ = [
    "autop",
    "default_allowed_tags",
    "default_post_tags",
    "kses",
    "strip_comments",
    "strip_empty_paragraphs",
    "strip_presentation_attributes",
    "strip_shortcodes",
]

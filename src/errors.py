"""Exceptions raised by the republication pipeline."""

from __future__ import annotations


class RepublishError(Exception):
    """Base class for republication errors."""


class InvalidContentIdError(RepublishError):
    """Raised when the item bound to a republish page no longer exists."""

    def __init__(self, item_id: int) -> None:
        self.item_id = item_id
        super().__init__(f"Invalid post ID: {item_id}")

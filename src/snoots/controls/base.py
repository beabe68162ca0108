"""Base class for resource controls."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class BaseControls:
    """Controls for one kind of Reddit item.

    `prefix` is the item's type prefix, e.g. "t1_" for comments.
    """

    def __init__(self, client: Client, prefix: str):
        self.client = client
        self.prefix = prefix

    def namespace(self, id: str) -> str:
        """Turn an item ID into a fullname ("abc" -> "t1_abc")."""
        return id if id.startswith(self.prefix) else f"{self.prefix}{id}"

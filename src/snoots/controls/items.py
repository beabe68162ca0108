"""Controls for comments and posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .voteable import VoteableControls

if TYPE_CHECKING:
    from ..client import Client


class CommentControls(VoteableControls):
    """Controls for interacting with comments."""

    def __init__(self, client: Client):
        super().__init__(client, "t1")


class PostControls(VoteableControls):
    """Controls for interacting with posts."""

    def __init__(self, client: Client):
        super().__init__(client, "t3")

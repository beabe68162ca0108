"""Resource controls built on the Client's get/post/post_json."""

from .base import BaseControls
from .items import CommentControls, PostControls
from .voteable import VoteableControls, VoteRequest

__all__ = [
    "BaseControls",
    "CommentControls",
    "PostControls",
    "VoteableControls",
    "VoteRequest",
]

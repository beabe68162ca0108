"""Controls shared by everything that can be voted on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel

from .base import BaseControls

if TYPE_CHECKING:
    from ..client import Client

# 1 = upvote, 0 = no vote, -1 = downvote
Vote = Literal[1, 0, -1]


class ThingRequest(BaseModel):
    id: str


class VoteRequest(ThingRequest):
    dir: Vote


class RemoveRequest(ThingRequest):
    spam: bool = False


class SendRepliesRequest(ThingRequest):
    state: bool


class EditRequest(BaseModel):
    thing_id: str
    text: str


class VoteableControls(BaseControls):
    """Voting, saving, editing and moderation for comments and posts."""

    def __init__(self, client: Client, type: str):
        super().__init__(client, f"{type}_")

    async def _post_thing(self, path: str, id: str) -> None:
        await self.client.post(path, ThingRequest(id=self.namespace(id)))

    async def _inbox_replies(self, id: str, enabled: bool) -> None:
        await self.client.post(
            "api/sendreplies", SendRepliesRequest(id=self.namespace(id), state=enabled)
        )

    async def enable_inbox_replies(self, id: str) -> None:
        await self._inbox_replies(id, True)

    async def disable_inbox_replies(self, id: str) -> None:
        await self._inbox_replies(id, False)

    async def _vote(self, id: str, vote: Vote) -> None:
        await self.client.post("api/vote", VoteRequest(id=self.namespace(id), dir=vote))

    async def upvote(self, id: str) -> None:
        await self._vote(id, 1)

    async def unvote(self, id: str) -> None:
        """Remove your vote."""
        await self._vote(id, 0)

    async def downvote(self, id: str) -> None:
        await self._vote(id, -1)

    async def save(self, id: str) -> None:
        """Save an item so it shows up at reddit.com/saved."""
        await self._post_thing("api/save", id)

    async def unsave(self, id: str) -> None:
        await self._post_thing("api/unsave", id)

    async def edit(self, id: str, new_text: str) -> None:
        await self.client.post(
            "api/editusertext", EditRequest(thing_id=self.namespace(id), text=new_text)
        )

    async def delete(self, id: str) -> None:
        await self._post_thing("api/del", id)

    # Moderation; these need the `posts` mod permission on the subreddit

    async def approve(self, id: str) -> None:
        await self._post_thing("api/approve", id)

    async def remove(self, id: str, spam: bool = False) -> None:
        """Remove an item, optionally marking it as spam."""
        await self.client.post("api/remove", RemoveRequest(id=self.namespace(id), spam=spam))

    async def ignore_future_reports(self, id: str) -> None:
        await self._post_thing("api/ignore_reports", id)

    async def unignore_future_reports(self, id: str) -> None:
        await self._post_thing("api/unignore_reports", id)

    async def gild(self, id: str) -> None:
        """Give Reddit gold to the author of an item."""
        await self.client.post(f"api/v1/gold/gild/{self.namespace(id)}", {})

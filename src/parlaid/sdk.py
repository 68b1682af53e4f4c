"""Parlaid SDK - High-level API for streaming Parler collections as JSON."""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from parlaid.config import Config, get_config
from parlaid.exceptions import UsageError
from parlaid.models.credentials import Credentials
from parlaid.models.page import reduce_key
from parlaid.models.profile import Profile
from parlaid.output.console import Console, Output
from parlaid.output.json_writer import JsonArraySink
from parlaid.services.pager import Pager
from parlaid.services.parler_client import ParlerClient
from parlaid.services.session import SessionState
from parlaid.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collection:
    """How to page through one kind of collection."""

    request: str  # ParlerClient request method
    key: str  # response key holding the items
    page_size: int
    disable_page_size: bool = False


COLLECTIONS: dict[str, Collection] = {
    "posts": Collection("request_creator", "posts", 20),
    "echoes": Collection("request_creator", "postRefs", 20),
    "votes": Collection("request_votes", "posts", 20),
    "following": Collection("request_following", "followees", 10),
    "followers": Collection("request_followers", "followers", 10),
    "user_comments": Collection("request_user_comments", "comments", 10),
    # This endpoint rejects the limit parameter
    "post_comments": Collection("request_post_comments", "comments", 10, True),
}


class Parlaid:
    """High-level SDK writing Parler collections as a streaming JSON array.

    Example usage:
        ```python
        from parlaid import Parlaid, load_credentials

        credentials = load_credentials("config/auth.json")
        async with Parlaid(credentials) as client:
            await client.posts("someone")
        ```

    Args:
        credentials: Session tokens sent with every request
        config: Configuration (default: the global configuration)
        output: Where the JSON is written (default: stdout)
        rate_limiter: Rate limiter (default: one following ``config``)
        session: Session state receiving response headers
        transport: httpx transport, e.g. ``httpx.MockTransport`` in tests
    """

    def __init__(
        self,
        credentials: Credentials,
        config: Optional[Config] = None,
        output: Optional[Output] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[SessionState] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.output = output or Console()
        self.client = ParlerClient(
            credentials,
            config=config or get_config(),
            rate_limiter=rate_limiter,
            session=session,
            transport=transport,
        )
        self.sink = JsonArraySink(self.output)
        self.pager = Pager(self.client, self.sink)

    async def __aenter__(self) -> "Parlaid":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close all HTTP connections."""
        await self.client.close()

    async def get_profile(self, username: str) -> Profile:
        """Look up a user profile."""
        logger.debug("Looking up profile for %s", username)
        return await self.client.get_profile(username)

    async def write_profile(self, username: str) -> Profile:
        """Write a user's raw profile document as one JSON line."""
        profile = await self.get_profile(username)
        self.output.write_out(json.dumps(profile.raw, ensure_ascii=False))
        self.output.write_out("\n")
        return profile

    async def fetch(self, name: str, profile: Profile) -> int:
        """Stream every item of a named collection belonging to ``profile``.

        Returns:
            Number of items written
        """
        collection = COLLECTIONS.get(name)
        if collection is None:
            raise UsageError(f"Unknown collection: {name}")

        logger.info("Fetching %s for %s", name, profile.username or profile.id)

        self.client.page_size = collection.page_size
        if collection.disable_page_size:
            self.client.disable_page_size()

        return await self.pager.paged_request(
            profile,
            getattr(self.client, collection.request),
            reduce_key(collection.key),
        )

    async def _fetch_for_user(self, name: str, username: str) -> int:
        profile = await self.get_profile(username)
        return await self.fetch(name, profile)

    async def posts(self, username: str) -> int:
        """Stream all posts created by a user."""
        return await self._fetch_for_user("posts", username)

    async def echoes(self, username: str) -> int:
        """Stream all posts a user has echoed."""
        return await self._fetch_for_user("echoes", username)

    async def votes(self, username: str) -> int:
        """Stream all posts a user has up-voted."""
        return await self._fetch_for_user("votes", username)

    async def following(self, username: str) -> int:
        """Stream all users a user follows."""
        return await self._fetch_for_user("following", username)

    async def followers(self, username: str) -> int:
        """Stream all followers of a user."""
        return await self._fetch_for_user("followers", username)

    async def user_comments(self, username: str) -> int:
        """Stream all comments written by a user."""
        return await self._fetch_for_user("user_comments", username)

    async def post_comments(self, post_id: str) -> int:
        """Stream all comments on a post."""
        return await self.fetch("post_comments", Profile(id=post_id))

"""Tests for the Parlaid SDK class."""

import json

import pytest

from parlaid import Parlaid
from parlaid.exceptions import ParlerAPIError, UsageError
from parlaid.models.profile import Profile
from parlaid.sdk import COLLECTIONS


@pytest.fixture
def sdk(credentials, test_config, rate_limiter, api, buffer):
    return Parlaid(
        credentials,
        config=test_config,
        output=buffer,
        rate_limiter=rate_limiter,
        transport=api.transport,
    )


def people(count, start=0):
    return [{"username": f"user{i}"} for i in range(start, start + count)]


class TestParlaidCollections:
    """Tests for the collection commands."""

    @pytest.mark.asyncio
    async def test_posts(self, sdk, api, buffer):
        api.add("/v1/profile", {"_id": "u1", "username": "someone"})
        api.add(
            "/v1/post/creator",
            {"posts": [{"_id": f"p{i}"} for i in range(20)], "next": "k1", "last": False},
            {"posts": [{"_id": f"p{i}"} for i in range(20, 25)], "next": "k2", "last": True},
        )

        async with sdk:
            total = await sdk.posts("someone")

        assert total == 25
        assert api.paths() == ["/v1/profile", "/v1/post/creator", "/v1/post/creator"]
        assert dict(api.requests[1].url.params) == {"id": "u1", "limit": "20"}
        assert dict(api.requests[2].url.params) == {"id": "u1", "limit": "20", "startkey": "k1"}
        assert [p["_id"] for p in json.loads(buffer.stdout)] == [f"p{i}" for i in range(25)]

    @pytest.mark.asyncio
    async def test_echoes_read_post_refs(self, sdk, api, buffer):
        api.add("/v1/profile", {"_id": "u1", "username": "someone"})
        api.add("/v1/post/creator", {"posts": [{"_id": "ignored"}], "postRefs": []})

        async with sdk:
            total = await sdk.echoes("someone")

        assert total == 0
        assert json.loads(buffer.stdout) == []

    @pytest.mark.asyncio
    async def test_following_uses_page_size_ten(self, sdk, api, buffer):
        api.add("/v1/profile", {"_id": "u1", "username": "someone"})
        api.add(
            "/v1/follow/following",
            {"followees": people(10), "next": "k1", "last": False},
            {"followees": people(2, 10), "last": True},
        )

        async with sdk:
            total = await sdk.following("someone")

        assert total == 12
        assert api.requests[1].url.params["limit"] == "10"
        assert len(json.loads(buffer.stdout)) == 12

    @pytest.mark.asyncio
    async def test_followers_votes_and_user_comments(self, sdk, api):
        for _ in range(3):
            api.add("/v1/profile", {"_id": "u1", "username": "someone"})
        api.add("/v1/follow/followers", {"followers": []})
        api.add("/v1/post/creator/liked", {"posts": []})
        api.add("/v1/comment/creator", {"comments": []})

        async with sdk:
            await sdk.followers("someone")
            await sdk.votes("someone")
            await sdk.user_comments("someone")

        assert api.paths()[1::2] == [
            "/v1/follow/followers",
            "/v1/post/creator/liked",
            "/v1/comment/creator",
        ]
        assert api.requests[5].url.params["username"] == "someone"

    @pytest.mark.asyncio
    async def test_post_comments_skip_profile_and_limit(self, sdk, api, buffer):
        api.add(
            "/v1/comment",
            {"comments": [{"body": "a"}], "next": "k1", "last": False},
            {"comments": [{"body": "b"}], "last": True},
        )

        async with sdk:
            total = await sdk.post_comments("post1")

        assert total == 2
        assert api.paths() == ["/v1/comment", "/v1/comment"]
        assert dict(api.requests[0].url.params) == {"id": "post1", "reverse": "true"}
        assert "limit" not in api.requests[1].url.params
        assert sdk.client.page_size_disabled is False
        assert json.loads(buffer.stdout) == [{"body": "a"}, {"body": "b"}]

    @pytest.mark.asyncio
    async def test_unknown_collection(self, sdk):
        with pytest.raises(UsageError, match="Unknown collection"):
            await sdk.fetch("likes", Profile(id="u1"))

    @pytest.mark.asyncio
    async def test_failure_mid_stream_leaves_array_open(self, sdk, api, buffer):
        api.add("/v1/profile", {"_id": "u1", "username": "someone"})
        api.add("/v1/post/creator", {"posts": [{"_id": "p0"}], "next": "k1"})
        api.add("/v1/post/creator", {"message": "boom"}, status=500)

        async with sdk:
            with pytest.raises(ParlerAPIError):
                await sdk.posts("someone")

        assert buffer.stdout == '[\n{"_id":"p0"}'

    def test_collection_table(self):
        assert set(COLLECTIONS) == {
            "posts",
            "echoes",
            "votes",
            "following",
            "followers",
            "user_comments",
            "post_comments",
        }
        assert COLLECTIONS["post_comments"].disable_page_size is True


class TestParlaidProfile:
    """Tests for profile output."""

    @pytest.mark.asyncio
    async def test_write_profile(self, sdk, api, buffer):
        document = {"_id": "u1", "username": "someone", "bio": "héllo"}
        api.add("/v1/profile", document)

        async with sdk:
            profile = await sdk.write_profile("someone")

        assert profile.username == "someone"
        assert buffer.stdout.endswith("\n")
        assert json.loads(buffer.stdout) == document

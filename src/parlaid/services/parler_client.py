"""Parler REST API client."""

import logging
from collections.abc import Callable
from typing import Any, Optional
from urllib.parse import quote

import httpx

from parlaid.config import Config, get_config
from parlaid.exceptions import ParlerAPIError, ParlerNotFoundError
from parlaid.models.credentials import Credentials
from parlaid.models.page import PageResult
from parlaid.models.profile import Profile
from parlaid.services.session import SessionState
from parlaid.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

QueryBuilder = Callable[[Profile], dict[str, str]]


def id_query(profile: Profile) -> dict[str, str]:
    """Identify a collection by the profile's id."""
    return {"id": profile.id or ""}


def username_query(profile: Profile) -> dict[str, str]:
    """Identify a collection by the profile's username."""
    return {"username": profile.username or ""}


def reverse_id_query(profile: Profile) -> dict[str, str]:
    """Identify a post's comments, oldest first."""
    return {"id": profile.id or "", "reverse": "true"}


def _error_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class ParlerClient:
    """Async client for the Parler REST API.

    Every request waits on the rate limiter first, and every response's
    headers are handed to the session and then the rate limiter before the
    status or body is looked at.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: Optional[Config] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[SessionState] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or get_config()
        self.credentials = credentials
        self.rate_limiter = rate_limiter or RateLimiter(
            enabled=self.config.rate_limiting_enabled
        )
        self.session = session or SessionState(credentials)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._page_size = self.config.page_size
        self._page_size_disabled = False

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: Any) -> None:
        try:
            page_size = int(value)
        except (TypeError, ValueError):
            return
        if page_size > 0:
            self._page_size = page_size

    @property
    def page_size_disabled(self) -> bool:
        return self._page_size_disabled

    def disable_page_size(self) -> None:
        """Omit the ``limit`` parameter until ``restore_page_size`` is called.

        Some endpoints reject it.
        """
        self._page_size_disabled = True

    def restore_page_size(self) -> None:
        self._page_size_disabled = False

    def _get_headers(self) -> dict[str, str]:
        """Get headers sent with every request."""
        return {
            "User-Agent": self.config.user_agent,
            "Origin": self.config.origin,
        }

    def _extra_headers(self, username: Optional[str]) -> dict[str, str]:
        headers = {"Cookie": self.credentials.cookie}
        if username:
            origin = self.config.origin.rstrip("/")
            headers["Referrer"] = f"{origin}/profile/{quote(username, safe='')}/posts"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "ParlerClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(
        self,
        endpoint: str,
        params: dict[str, str],
        username: Optional[str] = None,
    ) -> httpx.Response:
        """Issue one authenticated GET request."""
        client = await self._get_client()
        request = client.build_request(
            "GET", endpoint, params=params, headers=self._extra_headers(username)
        )

        logger.info("Fetching %s", request.url)
        await self.rate_limiter.wait()

        response = await client.send(request)

        self.session.update(response.headers)
        self.rate_limiter.update(response.headers)

        if response.status_code == 404:
            raise ParlerNotFoundError(
                f"Resource not found: {endpoint}",
                response_body=_error_body(response),
            )
        elif not response.is_success:
            body = _error_body(response)
            raise ParlerAPIError(
                f"API error {response.status_code}: {body.get('message', response.reason_phrase)}",
                status_code=response.status_code,
                response_body=body,
            )

        return response

    async def get(
        self,
        endpoint: str,
        params: Optional[dict[str, str]] = None,
        username: Optional[str] = None,
    ) -> dict[str, Any]:
        """Make a GET request and return the JSON object it responds with."""
        response = await self._request(endpoint, params or {}, username=username)
        try:
            data = response.json()
        except ValueError as e:
            raise ParlerAPIError(
                f"Malformed response body from {endpoint}",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise ParlerAPIError(
                f"Unexpected response body from {endpoint}",
                status_code=response.status_code,
            )
        return data

    async def get_page(
        self,
        endpoint: str,
        profile: Profile,
        start_key: Optional[str] = None,
        query: QueryBuilder = id_query,
    ) -> PageResult:
        """Fetch one page of a paged collection.

        Args:
            endpoint: API path relative to the base URL
            profile: User or post the collection belongs to
            start_key: Continuation key from the previous page, None to start
            query: Builds the parameters identifying the collection

        Returns:
            PageResult for the page
        """
        params = dict(query(profile))
        if not self._page_size_disabled:
            params["limit"] = str(self.page_size)
        if start_key:
            params["startkey"] = start_key

        data = await self.get(endpoint, params, username=profile.username)
        return PageResult.from_api(data)

    # Resource endpoints

    async def get_profile(self, username: str) -> Profile:
        """Look up a user profile by username."""
        data = await self.get("v1/profile", {"username": username}, username=username)
        return Profile.from_api(data)

    async def request_creator(self, profile: Profile, start_key: Optional[str]) -> PageResult:
        """Posts and echoes created by a user."""
        return await self.get_page("v1/post/creator", profile, start_key)

    async def request_following(self, profile: Profile, start_key: Optional[str]) -> PageResult:
        """Users a user follows."""
        return await self.get_page("v1/follow/following", profile, start_key)

    async def request_followers(self, profile: Profile, start_key: Optional[str]) -> PageResult:
        """Users following a user."""
        return await self.get_page("v1/follow/followers", profile, start_key)

    async def request_user_comments(
        self, profile: Profile, start_key: Optional[str]
    ) -> PageResult:
        """Comments written by a user."""
        return await self.get_page(
            "v1/comment/creator", profile, start_key, query=username_query
        )

    async def request_post_comments(
        self, profile: Profile, start_key: Optional[str]
    ) -> PageResult:
        """Comments on a post."""
        return await self.get_page("v1/comment", profile, start_key, query=reverse_id_query)

    async def request_votes(self, profile: Profile, start_key: Optional[str]) -> PageResult:
        """Posts a user has up-voted."""
        return await self.get_page("v1/post/creator/liked", profile, start_key)

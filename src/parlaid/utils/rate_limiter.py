"""Rate limiter driven by API response headers."""

import asyncio
import logging
import math
import secrets
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20

# Seconds between reset-time checks while the window is exhausted
POLL_INTERVAL = 0.5

# One random byte divided by this gives the jitter in seconds, [0, 1)
JITTER_DIVISOR = 256

LIMIT_HEADER = "x-ratelimit-limit"
REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]
RandomBytes = Callable[[int], bytes]


def now_ms() -> float:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time() * 1000


def format_time_remaining(seconds: float) -> str:
    """Format seconds into a human-friendly string."""
    if seconds <= 0:
        return "now"

    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        if secs > 0:
            return f"{minutes} min {secs} sec"
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        if minutes > 0:
            return f"{hours} hr {minutes} min"
        return f"{hours} hour{'s' if hours != 1 else ''}"


def format_reset_time(reset_ms: float) -> str:
    """Format a millisecond reset timestamp as local HH:MM:SS.

    Instants the platform cannot represent are returned as raw milliseconds.
    """
    try:
        return datetime.fromtimestamp(reset_ms / 1000).strftime("%H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return f"{reset_ms:.0f} ms"


def _parse_number(value: object) -> float | None:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class RateLimitState:
    """Rate limit window as last advertised by the server."""

    limit: int = DEFAULT_LIMIT
    remaining: int = DEFAULT_LIMIT
    reset_time: float = field(default_factory=now_ms)  # milliseconds since epoch

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining <= 0

    def seconds_until_reset(self, now: float) -> float:
        """Get seconds from ``now`` (milliseconds) until the window resets."""
        return max(0.0, (self.reset_time - now) / 1000)

    def update_from_headers(self, headers: Mapping[str, str], now: float) -> None:
        """Update state from response headers.

        A header that is absent leaves its field untouched. A header that is
        present but not a finite number resets its field to the default, with
        ``now`` as the default reset instant. The reset header is in seconds
        and is stored in milliseconds.
        """
        if LIMIT_HEADER in headers:
            value = _parse_number(headers[LIMIT_HEADER])
            self.limit = DEFAULT_LIMIT if value is None else max(0, int(value))
        if REMAINING_HEADER in headers:
            value = _parse_number(headers[REMAINING_HEADER])
            self.remaining = DEFAULT_LIMIT if value is None else max(0, int(value))
        if RESET_HEADER in headers:
            value = _parse_number(headers[RESET_HEADER])
            self.reset_time = now if value is None else value * 1000


@dataclass
class RateLimiter:
    """Throttles requests from the server's advertised rate limit headers.

    The server's counters are trusted as-is: ``remaining`` is only ever set
    from a response, never decremented locally. Every request additionally
    gets a small random delay so requests do not leave at a fixed cadence.

    With ``enabled=False`` headers are ignored and only the jitter applies.

    The clock (milliseconds), the async sleep and the random byte source are
    injectable so waits can be driven without real time passing.
    """

    enabled: bool = True
    clock: Clock = now_ms
    sleep: Sleep = asyncio.sleep
    random_bytes: RandomBytes = secrets.token_bytes
    poll_interval: float = POLL_INTERVAL
    jitter_divisor: int = JITTER_DIVISOR
    state: RateLimitState = field(init=False)

    def __post_init__(self) -> None:
        self.state = RateLimitState(reset_time=self.clock())

    def update(self, headers: Mapping[str, str]) -> None:
        """Update the rate limit state from one response's headers."""
        if not self.enabled:
            return
        normalized = {str(k).lower(): v for k, v in headers.items()}
        self.state.update_from_headers(normalized, now=self.clock())

    async def wait(self) -> None:
        """Wait until the next request may be issued."""
        if self.enabled and self.state.is_exhausted:
            await self._wait_for_reset()
        await self._jitter()

    async def _wait_for_reset(self) -> None:
        """Poll until the clock passes the reset time.

        The reset time is re-read on every tick, so a value changed while
        waiting is honored. There is no timeout; cancel the task to abort.
        """
        now = self.clock()
        logger.warning(
            "Rate limit exhausted (0/%d remaining). Resets in %s (at %s)",
            self.state.limit,
            format_time_remaining(self.state.seconds_until_reset(now)),
            format_reset_time(self.state.reset_time),
        )
        while self.clock() <= self.state.reset_time:
            await self.sleep(self.poll_interval)
        logger.debug("Rate limit window reset")

    def jitter_seconds(self) -> float:
        """Draw one jitter delay from a single cryptographically random byte."""
        return self.random_bytes(1)[0] / self.jitter_divisor

    async def _jitter(self) -> None:
        delay = self.jitter_seconds()
        logger.debug("Sleeping %.3fs before request", delay)
        await self.sleep(delay)

"""Parlaid - Stream paged Parler API collections as JSON.

This SDK fetches profiles, posts, echoes, follows, comments and votes using
pre-obtained session tokens, honoring the server's rate limit headers, and
writes each collection as a single streaming JSON array.

Example usage:
    ```python
    from parlaid import Parlaid, load_credentials

    credentials = load_credentials("config/auth.json")
    async with Parlaid(credentials) as client:
        await client.followers("someone")
    ```
"""

__version__ = "0.1.0"

from parlaid.config import Config, get_config, load_credentials, set_config
from parlaid.exceptions import (
    ConfigurationError,
    DispatchError,
    ParlaidError,
    ParlerAPIError,
    ParlerNotFoundError,
    UsageError,
)
from parlaid.models import Credentials, PageResult, Profile
from parlaid.output import BufferOutput, Console, JsonArraySink
from parlaid.sdk import COLLECTIONS, Parlaid
from parlaid.services import Pager, ParlerClient, SessionState
from parlaid.utils import RateLimiter, RateLimitState

__all__ = [
    # Main SDK class
    "Parlaid",
    "COLLECTIONS",
    # Configuration
    "Config",
    "get_config",
    "set_config",
    "load_credentials",
    # Exceptions
    "ParlaidError",
    "ConfigurationError",
    "UsageError",
    "DispatchError",
    "ParlerAPIError",
    "ParlerNotFoundError",
    # Models
    "Credentials",
    "PageResult",
    "Profile",
    # Core
    "ParlerClient",
    "Pager",
    "SessionState",
    "RateLimiter",
    "RateLimitState",
    # Output
    "Console",
    "BufferOutput",
    "JsonArraySink",
]

"""Session state fed from response headers."""

import logging
from collections.abc import Callable, Mapping

from parlaid.models.credentials import Credentials

logger = logging.getLogger(__name__)

Rotator = Callable[[Credentials, Mapping[str, str]], None]


class SessionState:
    """Receives the headers of every response.

    This is the hook point for server-driven credential rotation: a
    ``rotator`` callback gets the credentials and each response's headers and
    may call ``Credentials.rotate``. Without one, headers are only recorded.
    """

    def __init__(self, credentials: Credentials, rotator: Rotator | None = None):
        self.credentials = credentials
        self.rotator = rotator
        self.headers: dict[str, str] = {}
        self.responses = 0

    def update(self, headers: Mapping[str, str]) -> None:
        """Record a response's headers and offer them to the rotator."""
        self.headers = {str(k).lower(): v for k, v in headers.items()}
        self.responses += 1
        if self.rotator is not None:
            self.rotator(self.credentials, self.headers)
            logger.debug("Session rotator applied after response %d", self.responses)

"""Exceptions for Parlaid.

Exception Hierarchy:
    ParlaidError (base, exit status 127)
    ├── ConfigurationError (bad authorization file, missing request callback; status 2)
    ├── UsageError (invalid or missing command usage; status 1)
    ├── DispatchError (a result callback refused a page)
    └── ParlerAPIError (HTTP responses with error status codes or bad bodies)
        └── ParlerNotFoundError (404 not found)

Every error carries the process exit status the CLI uses when it reaches the
top-level handler. The library itself never terminates the process.
"""

__all__ = [
    "EXIT_FAILURE",
    "EXIT_CONFIGURATION",
    "EXIT_USAGE",
    "ParlaidError",
    "ConfigurationError",
    "UsageError",
    "DispatchError",
    "ParlerAPIError",
    "ParlerNotFoundError",
]

EXIT_FAILURE = 127
EXIT_CONFIGURATION = 2
EXIT_USAGE = 1


class ParlaidError(Exception):
    """Base exception for all Parlaid errors."""

    exit_code: int = EXIT_FAILURE


class ConfigurationError(ParlaidError):
    """Raised before any network activity when the run cannot be configured."""

    exit_code = EXIT_CONFIGURATION


class UsageError(ParlaidError):
    """Raised when a command is invoked with an invalid set of options."""

    exit_code = EXIT_USAGE


class DispatchError(ParlaidError):
    """Raised when a start, result or end callback does not accept its input."""

    pass


class ParlerAPIError(ParlaidError):
    """Raised for HTTP responses with error status codes or malformed bodies."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class ParlerNotFoundError(ParlerAPIError):
    """Raised when a resource is not found (HTTP 404)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 404,
        response_body: dict | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)

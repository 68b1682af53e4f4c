"""Session token models."""

import re
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, field_validator

# Cookie names the tokens may be pasted with, e.g. straight from a browser
_COOKIE_PREFIX = re.compile(r"^(?:mst|jst)=")

# Same character set as JavaScript's encodeURIComponent leaves untouched
_COOKIE_SAFE = "!~*'()"


def encode_token(value: str) -> str:
    """Percent-encode a token for use inside a Cookie header."""
    return quote(value, safe=_COOKIE_SAFE)


class Credentials(BaseModel):
    """The pair of opaque session tokens sent with every request.

    ``mst`` is the primary (master) session token and ``jst`` the secondary
    one. A leading ``mst=`` or ``jst=`` is stripped whenever a value is
    assigned, including later rotation.
    """

    model_config = ConfigDict(validate_assignment=True)

    mst: str
    jst: str = ""

    @field_validator("mst", "jst", mode="before")
    @classmethod
    def _strip_cookie_prefix(cls, value: Any) -> str:
        if value is None:
            raise ValueError("token must not be null")
        return _COOKIE_PREFIX.sub("", str(value))

    def rotate(self, mst: str | None = None, jst: str | None = None) -> None:
        """Replace one or both tokens in place."""
        if mst is not None:
            self.mst = mst
        if jst is not None:
            self.jst = jst

    @property
    def cookie(self) -> str:
        """Cookie header value carrying both tokens."""
        parts = [f"mst={encode_token(self.mst)}"]
        if self.jst:
            parts.append(f"jst={encode_token(self.jst)}")
        return "; ".join(parts)

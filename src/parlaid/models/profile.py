"""Profile models."""

from typing import Any

from pydantic import BaseModel, Field


class Profile(BaseModel):
    """Identity of a user or post whose collections are fetched.

    A profile looked up from the API carries both a username and an id; a
    post comment fetch only carries the post id.
    """

    username: str | None = None
    id: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Profile":
        """Create from a ``v1/profile`` response."""
        identifier = data.get("_id", data.get("id"))
        return cls(
            username=data.get("username"),
            id=str(identifier) if identifier is not None else None,
            raw=data,
        )

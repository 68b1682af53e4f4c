"""Paged API response models."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field


class PageResult(BaseModel):
    """One page of a paged collection.

    ``data`` holds the full response document; the item list lives under a
    resource-specific key (``posts``, ``followees``, ``comments``...) and is
    pulled out by a reduction function.
    """

    data: dict[str, Any] = Field(default_factory=dict)
    next: str | None = None
    last: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PageResult":
        """Create from a paged API response."""
        next_key = data.get("next")
        return cls(
            data=data,
            next=str(next_key) if next_key not in (None, "") else None,
            # Only a literal true ends paging; truthy strings do not
            last=data.get("last") is True,
        )


Reducer = Callable[[PageResult], list[dict[str, Any]]]


def reduce_key(key: str) -> Reducer:
    """Build a reduction function returning the list stored under ``key``."""

    def reduce(record: PageResult) -> list[dict[str, Any]]:
        items = record.data.get(key)
        return list(items) if isinstance(items, list) else []

    return reduce

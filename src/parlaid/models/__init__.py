"""Data models for Parlaid."""

from parlaid.models.credentials import Credentials
from parlaid.models.page import PageResult, reduce_key
from parlaid.models.profile import Profile

__all__ = [
    "Credentials",
    "PageResult",
    "Profile",
    "reduce_key",
]

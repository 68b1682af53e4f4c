"""Services for Parler data collection."""

from parlaid.services.pager import Pager
from parlaid.services.parler_client import ParlerClient
from parlaid.services.session import SessionState

__all__ = [
    "Pager",
    "ParlerClient",
    "SessionState",
]

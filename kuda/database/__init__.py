"""Local client-side state: the bearer token and per-session screen state."""

from .session_cache import SessionCache
from .token_store import FileTokenStore, TokenStore

__all__ = ["FileTokenStore", "SessionCache", "TokenStore"]

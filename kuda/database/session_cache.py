"""
Lightweight in-memory session cache.

Holds per-client screen state for the HTTP API (keyed by bearer token) so
that the transfer form's in-flight guard and verification cache survive
between requests from the same client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SessionCache:
    def __init__(self) -> None:
        # session_key -> {name -> object}
        self._sessions: Dict[str, Dict[str, Any]] = {}

    def get(self, session_key: str, name: str) -> Optional[Any]:
        return self._sessions.get(session_key, {}).get(name)

    def set(self, session_key: str, name: str, value: Any) -> None:
        self._sessions.setdefault(session_key, {})[name] = value

    def delete_session(self, session_key: str) -> None:
        self._sessions.pop(session_key, None)

    def __contains__(self, session_key: str) -> bool:
        return session_key in self._sessions

    def ping(self) -> bool:
        return True

"""
Client-side bearer token storage.

The app keeps exactly one value locally: the backend auth token. It is set
when login or signup succeeds and cleared on logout. `TokenStore` keeps it in
memory; `FileTokenStore` persists it to a small JSON file, the desktop
equivalent of browser localStorage.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

TOKEN_KEY = "authToken"


class TokenStore:
    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear_token(self) -> None:
        self._token = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.get_token())


class FileTokenStore(TokenStore):
    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get_token(self) -> Optional[str]:
        return self._read().get(TOKEN_KEY)

    def set_token(self, token: str) -> None:
        data = self._read()
        data[TOKEN_KEY] = token
        self._write(data)

    def clear_token(self) -> None:
        data = self._read()
        if TOKEN_KEY in data:
            data.pop(TOKEN_KEY)
            self._write(data)

"""Persisted operator session.

The auth token and the operator profile live under two fixed keys of a small
JSON file and are always written and cleared together.
"""

import json
import os
from pathlib import Path
from typing import Any

from motebase_admin.core.logging import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "motebase_admin_token"
USER_KEY = "motebase_admin_user"


class SessionStore:
    """Client-local storage for the auth token and operator profile."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable session file", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        # Owner-only before any content lands, also for a pre-existing file.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2))

    def load(self) -> tuple[str | None, dict[str, Any] | None]:
        """Return the stored token and profile (None when absent)."""
        data = self._read()
        token = data.get(TOKEN_KEY) or None
        user = data.get(USER_KEY)
        if token is None:
            return None, None
        return token, user if isinstance(user, dict) else None

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = self._read()
        data[TOKEN_KEY] = token
        data[USER_KEY] = user
        self._write(data)

    def clear(self) -> None:
        data = self._read()
        if TOKEN_KEY not in data and USER_KEY not in data:
            return
        data.pop(TOKEN_KEY, None)
        data.pop(USER_KEY, None)
        self._write(data)

"""Persistent storage for the client session.

A session is a token plus a JSON profile blob kept under two well-known
keys. Both are always written and cleared together.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from greyn.core.logging import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "greyn_auth_token"
USER_DATA_KEY = "greyn_user_data"


class SessionStorage(Protocol):
    """Where the client keeps its session between runs."""

    def get_token(self) -> str | None: ...

    def get_profile(self) -> dict[str, Any] | None: ...

    def save(self, token: str, profile: dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


def _decode_profile(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    try:
        profile = json.loads(raw)
    except ValueError:
        logger.warning("Stored profile is not valid JSON")
        return None
    return profile if isinstance(profile, dict) else None


class MemorySessionStorage:
    """Keeps the session in a dict for the lifetime of the process."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get_token(self) -> str | None:
        return self.values.get(TOKEN_KEY)

    def get_profile(self) -> dict[str, Any] | None:
        return _decode_profile(self.values.get(USER_DATA_KEY))

    def save(self, token: str, profile: dict[str, Any]) -> None:
        self.values[TOKEN_KEY] = token
        self.values[USER_DATA_KEY] = json.dumps(profile)

    def clear(self) -> None:
        self.values.pop(TOKEN_KEY, None)
        self.values.pop(USER_DATA_KEY, None)


class FileSessionStorage:
    """Keeps the session in a JSON file.

    Writes go to a temporary file that replaces the target, so a reader
    sees either the old session or the new one.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the storage.

        Args:
            path: JSON file holding the session. Created on first save.
        """
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            content = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Session file unreadable", path=str(self.path), error=str(e))
            return {}
        return content if isinstance(content, dict) else {}

    def _write(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def get_token(self) -> str | None:
        return self._read().get(TOKEN_KEY)

    def get_profile(self) -> dict[str, Any] | None:
        return _decode_profile(self._read().get(USER_DATA_KEY))

    def save(self, token: str, profile: dict[str, Any]) -> None:
        values = self._read()
        values[TOKEN_KEY] = token
        values[USER_DATA_KEY] = json.dumps(profile)
        self._write(values)

    def clear(self) -> None:
        values = self._read()
        if TOKEN_KEY not in values and USER_DATA_KEY not in values:
            return
        values.pop(TOKEN_KEY, None)
        values.pop(USER_DATA_KEY, None)
        self._write(values)

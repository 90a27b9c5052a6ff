"""Persisted client session: ``{"user": {...}, "token": "..."}`` under key ``"user"``.

Storage backends mimic browser localStorage (string values under string keys).
``FileStorage`` keeps them in a JSON file so a session survives restarts;
``MemoryStorage`` is for tests and short-lived scripts.

A stored value that is missing, unparsable, null, or lacks a token means
"not authenticated". Token expiry is read from the unverified ``exp`` claim;
the server remains the authority on validity.
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional

import jwt

from api.utils.debug import print__client_debug

STORAGE_KEY = "user"


# ==============================================================================
# STORAGE BACKENDS
# ==============================================================================


class MemoryStorage:
    """localStorage-like string store held in a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """localStorage-like string store persisted as one JSON object on disk.

    Writes go to a temporary file that replaces the original, so a crash
    mid-write never leaves a truncated file behind.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            print__client_debug(f"SESSION FILE: unreadable {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)


# ==============================================================================
# SESSION
# ==============================================================================


def token_expiry(token: str) -> Optional[int]:
    """The unverified ``exp`` claim of ``token`` (None when absent).

    Raises:
        jwt.DecodeError: ``token`` is not a decodable JWT.
    """
    claims = jwt.decode(token, options={"verify_signature": False})
    exp = claims.get("exp")
    return int(exp) if exp is not None else None


def is_token_expired(token: str, now: Optional[float] = None) -> bool:
    """True when the token's exp is in the past or the token cannot be decoded."""
    try:
        exp = token_expiry(token)
    except jwt.InvalidTokenError:
        return True
    if exp is None:
        return False
    return exp <= (now if now is not None else time.time())


@dataclass
class Session:
    user: dict
    token: str

    def is_expired(self, now: Optional[float] = None) -> bool:
        return is_token_expired(self.token, now)


class SessionStore:
    """Reads and writes the session under ``STORAGE_KEY``."""

    def __init__(self, storage=None):
        self.storage = storage if storage is not None else MemoryStorage()

    def load(self) -> Optional[Session]:
        raw = self.storage.get_item(STORAGE_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            print__client_debug("SESSION LOAD: stored session is not valid JSON")
            return None
        if not isinstance(data, dict):
            return None

        token = data.get("token")
        user = data.get("user")
        if not isinstance(token, str) or not token or not isinstance(user, dict):
            return None
        return Session(user=user, token=token)

    def save(self, session: Session) -> None:
        self.storage.set_item(STORAGE_KEY, json.dumps(asdict(session)))

    def clear(self) -> None:
        self.storage.remove_item(STORAGE_KEY)

    def token(self) -> Optional[str]:
        session = self.load()
        return session.token if session else None

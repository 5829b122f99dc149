from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)

TOKEN_KEY = "jwt_token"


class SessionStore:
    """The single persisted session slot: get / set / clear."""

    def get(self) -> str | None:
        raise NotImplementedError

    def set(self, value: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    def __init__(self, value: str | None = None):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value

    def clear(self):
        self.value = None


class FileSessionStore(SessionStore):
    """Keeps the slot in a small JSON file, one file per user profile."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _load(self) -> dict:
        try:
            if self.path.exists():
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                    return data if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable session file %s: %s", self.path, e)
        return {}

    def _dump(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise

    def get(self):
        v = self._load().get(TOKEN_KEY)
        return v if isinstance(v, str) and v else None

    def set(self, value):
        data = self._load()
        data[TOKEN_KEY] = value
        self._dump(data)

    def clear(self):
        data = self._load()
        if TOKEN_KEY not in data:
            return
        data.pop(TOKEN_KEY, None)
        if data:
            self._dump(data)
        else:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass

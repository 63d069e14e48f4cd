"""Key-value storage backends for persisted query state."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
import re
import shutil
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]{1,100}$")


@runtime_checkable
class KeyValueStore(Protocol):
    """String-valued storage keyed by name (browser storage, files, memory)."""

    def get(self, key: str) -> str | None:  # pragma: no cover - Protocol only
        """Return the stored value, or None when the key was never set."""

    def set(self, key: str, value: str) -> None:  # pragma: no cover - Protocol only
        """Replace the value stored under ``key``."""


class InMemoryStore:
    """Dict-backed store for tests and short-lived sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStore:
    """Persist each key as its own file under ``root``.

    Writes go to a temporary sibling first and are then moved into place, so
    a reader never observes a half-written value.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> str | None:
        path = self._key_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._key_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            tmp_path.write_text(value, encoding="utf-8")
            shutil.move(str(tmp_path), str(path))
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def _key_path(self, key: str) -> Path:
        if _SAFE_KEY.match(key) and key not in {".", ".."}:
            return self.root / f"{key}.json"
        digest = hashlib.sha256(key.encode()).hexdigest()
        return self.root / f"key_{digest}.json"

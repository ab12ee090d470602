# moviedeck/core/storage.py
"""
String key-value slots with browser-storage semantics: every slot holds a
string, missing slots read as None, and removing a missing slot is a no-op.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from moviedeck.core.logger import setup_logger

logger = setup_logger(__name__)


class KeyValueStorage:
    """Interface shared by the in-memory and file-backed stores."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._slots[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._slots.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    All slots live in one JSON object on disk. The file is re-read on every
    access so a fresh process always sees the last successful write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    # ─── File helpers ─────────────────────────────────────────────────────────
    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("[STORAGE] ❌ Unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("[STORAGE] ❌ Storage file %s is not a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, slots: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(slots, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug("[STORAGE] Wrote %d slot(s) to %s", len(slots), self.path)

    # ─── KeyValueStorage ──────────────────────────────────────────────────────
    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        slots = self._read()
        slots[key] = str(value)
        self._write(slots)

    def remove_item(self, key: str) -> None:
        slots = self._read()
        if slots.pop(key, None) is not None:
            self._write(slots)

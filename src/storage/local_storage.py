# src/storage/local_storage.py

"""File-backed string key-value store with ``localStorage`` semantics."""

import json
import logging
from pathlib import Path

from src.config.settings import Settings

logger = logging.getLogger("consulteja.storage")


class LocalStorage:
    """String keys to string values, persisted as one JSON object.

    Every write rewrites the whole file. A missing or unreadable file
    behaves like an empty store.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.STORAGE_PATH
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._items: dict[str, str] = self._read()
        logger.debug(
            "LocalStorage opened at %s (%d keys)",
            self.path,
            len(self._items),
        )

    def _read(self) -> dict[str, str]:
        """Load the backing file, tolerating absence and corruption."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Ignoring unreadable storage file %s: %s",
                self.path,
                exc,
            )
            return {}
        if not isinstance(data, dict):
            logger.warning(
                "Ignoring storage file %s: top level is not an object",
                self.path,
            )
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._items, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._write()
        logger.debug("Stored key '%s' (%d chars)", key, len(value))

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._write()
            logger.debug("Removed key '%s'", key)

    def clear(self) -> None:
        """Remove every key."""
        self._items.clear()
        self._write()
        logger.info("Storage cleared at %s", self.path)

    def keys(self) -> list[str]:
        return list(self._items)

# src/storage/search_history.py

"""Bounded, most-recent-first history of successful lookups."""

import json
import logging
from collections.abc import Iterator

from src.config.settings import Settings
from src.models.product import ProductRecord
from src.storage.local_storage import LocalStorage

logger = logging.getLogger("consulteja.history")

HISTORY_KEY = "searchHistory"


class SearchHistory:
    """The last few products found, newest first.

    The list lives in memory and is mirrored to ``LocalStorage`` under
    ``searchHistory`` as a JSON array after every change.
    """

    def __init__(
        self,
        storage: LocalStorage | None = None,
        limit: int | None = None,
    ) -> None:
        self.storage = storage or LocalStorage()
        self.limit: int = (
            limit if limit is not None else Settings.HISTORY_LIMIT
        )
        self._entries: list[ProductRecord] = self._load()

    def _load(self) -> list[ProductRecord]:
        raw = self.storage.get_item(HISTORY_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored history is not valid JSON, starting empty")
            return []
        if not isinstance(data, list):
            logger.warning("Stored history is not a list, starting empty")
            return []

        entries = [
            ProductRecord.from_dict(item)
            for item in data
            if isinstance(item, dict)
        ]
        return entries[: self.limit]

    def _save(self) -> None:
        self.storage.set_item(
            HISTORY_KEY,
            json.dumps(
                [e.to_dict() for e in self._entries],
                ensure_ascii=False,
            ),
        )

    @property
    def entries(self) -> list[ProductRecord]:
        return list(self._entries)

    def add(self, record: ProductRecord) -> None:
        """Put ``record`` first, dropping the oldest beyond the limit."""
        self._entries = [record, *self._entries][: self.limit]
        self._save()
        logger.info(
            "History now holds %d entries (latest: %s from %s)",
            len(self._entries),
            record.barcode,
            record.source,
        )

    def clear(self) -> None:
        self._entries = []
        self.storage.remove_item(HISTORY_KEY)
        logger.info("History cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ProductRecord]:
        return iter(list(self._entries))

"""Local cart storage: the device-side durable copy of the cart.

Implementations persist a list of plain item dicts under a single key. A
corrupt or unreadable store is treated as an empty cart.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

STORAGE_KEY = "pureplatter_cart"


class LocalCartStorage(ABC):
    """Port for the local durable cart cache."""

    @abstractmethod
    def load(self) -> list[dict]:
        """Return the stored items, or an empty list when nothing is stored."""

    @abstractmethod
    def save(self, items: list[dict]) -> None:
        """Persist ``items``, replacing whatever was stored."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored cart."""


class InMemoryCartStorage(LocalCartStorage):
    def __init__(self, items: list[dict] | None = None) -> None:
        self._items = [dict(item) for item in items] if items else None

    def load(self) -> list[dict]:
        return [dict(item) for item in self._items] if self._items else []

    def save(self, items: list[dict]) -> None:
        self._items = [dict(item) for item in items]

    def clear(self) -> None:
        self._items = None

    @property
    def is_empty(self) -> bool:
        return not self._items


class JsonFileCartStorage(LocalCartStorage):
    """Stores the cart in a JSON document, keyed by ``STORAGE_KEY``."""

    def __init__(self, path: str | Path, key: str = STORAGE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable local cart storage, starting empty", path=str(self.path), error=str(exc))
            return {}
        return document if isinstance(document, dict) else {}

    def load(self) -> list[dict]:
        items = self._read_document().get(self.key)
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    def save(self, items: list[dict]) -> None:
        document = self._read_document()
        document[self.key] = items
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document), encoding="utf-8")

    def clear(self) -> None:
        document = self._read_document()
        if self.key not in document:
            return
        del document[self.key]
        self.path.write_text(json.dumps(document), encoding="utf-8")

"""Key-value store abstraction for per-user local state.

Saved recipients and the activity log are small JSON lists that are read
whole and written whole.  Stores notify subscribers after every write so
views can refresh without polling.  There is no locking: the last writer
wins.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Protocol

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.stored_value import StoredValue

logger = get_logger(__name__)

Listener = Callable[[str], None]


class KeyValueStore(Protocol):
    """Read/write whole entry lists by key, with change notification."""

    def read(self, key: str) -> list[dict[str, Any]]: ...

    def write(self, key: str, entries: list[dict[str, Any]]) -> None: ...

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


class _ObservableStore:
    """Listener bookkeeping shared by the concrete stores."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; call the returned function to unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)


class InMemoryStore(_ObservableStore):
    """Process-local store, used by tests and single-shot scripts."""

    def __init__(self) -> None:
        super().__init__()
        self._data: dict[str, list[dict[str, Any]]] = {}

    def read(self, key: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._data.get(key, []))

    def write(self, key: str, entries: list[dict[str, Any]]) -> None:
        self._data[key] = copy.deepcopy(entries)
        self._notify(key)


class SqlStore(_ObservableStore):
    """Store persisted in the ``stored_values`` table."""

    def __init__(self, db: Session) -> None:
        super().__init__()
        self.db = db

    def read(self, key: str) -> list[dict[str, Any]]:
        row = self.db.get(StoredValue, key)
        if row is None or not isinstance(row.value, list):
            return []
        return copy.deepcopy(row.value)

    def write(self, key: str, entries: list[dict[str, Any]]) -> None:
        row = self.db.get(StoredValue, key)
        if row is None:
            self.db.add(StoredValue(key=key, value=list(entries)))
        else:
            # Assign a new list so SQLAlchemy sees the JSON column change
            row.value = list(entries)
        self.db.commit()
        logger.debug("Stored %d entries under %s", len(entries), key)
        self._notify(key)

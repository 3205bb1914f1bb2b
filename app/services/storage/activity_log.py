"""Activity log of on-chain actions, newest first, on top of a KeyValueStore."""

from __future__ import annotations

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.schemas.recipient import ActivityLogEntry
from app.services.storage.store import KeyValueStore

logger = get_logger(__name__)

ACTIVITY_KEY = "tempo.dashboard.activityLog.v1"


class ActivityLog:
    """Bounded, de-duplicated history of wallet actions."""

    def __init__(self, store: KeyValueStore, config: Settings = settings) -> None:
        self.store = store
        self.config = config

    def entries(self) -> list[ActivityLogEntry]:
        entries: list[ActivityLogEntry] = []
        for raw in self.store.read(ACTIVITY_KEY):
            try:
                entries.append(ActivityLogEntry.model_validate(raw))
            except ValueError as exc:
                logger.warning("Dropping unreadable activity entry %r: %s", raw, exc)
        return entries

    def record(self, entry: ActivityLogEntry) -> list[ActivityLogEntry]:
        """Prepend ``entry``, replacing any older entry with the same hash and kind.

        The log is capped at ``activity_log_cap`` entries; the oldest fall off.
        """
        others = [
            e for e in self.entries() if not (e.hash == entry.hash and e.kind == entry.kind)
        ]
        updated = [entry, *others][: self.config.activity_log_cap]
        self.store.write(ACTIVITY_KEY, [e.to_wire() for e in updated])
        logger.debug("Recorded %s activity %s", entry.kind, entry.hash)
        return updated

    def clear(self) -> None:
        self.store.write(ACTIVITY_KEY, [])

"""Saved recipients (address book) on top of a KeyValueStore."""

from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from app.core.logging import get_logger
from app.schemas.recipient import Recipient
from app.services.ingestion.normalizer import is_valid_address, normalize_address
from app.services.storage.store import KeyValueStore

logger = get_logger(__name__)

RECIPIENTS_KEY = "tempo_recipients"
MAX_NAME_LENGTH = 50


class RecipientError(ValueError):
    """Raised when a recipient cannot be saved."""


def _now_ms() -> int:
    return int(time.time() * 1000)


class RecipientBook:
    """CRUD over the saved-recipient list.

    Addresses and names are unique case-insensitively.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.store = store
        self.clock = clock

    def entries(self) -> list[Recipient]:
        entries = self.store.read(RECIPIENTS_KEY)
        recipients: list[Recipient] = []
        for entry in entries:
            try:
                recipients.append(Recipient.model_validate(entry))
            except ValueError as exc:
                logger.warning("Dropping unreadable recipient entry %r: %s", entry, exc)
        return recipients

    def add(self, name: str, address: str) -> Recipient:
        """Validate and save a new recipient.

        Raises:
            RecipientError: On a blank or too-long name, a malformed
                address, or a duplicate address or name.
        """
        clean_name = (name or "").strip()
        if not clean_name:
            raise RecipientError("Name is required")
        if len(clean_name) > MAX_NAME_LENGTH:
            raise RecipientError(
                f"Name must be {MAX_NAME_LENGTH} characters or less"
            )
        if not is_valid_address(address):
            raise RecipientError("Invalid Ethereum address")

        existing = self.entries()
        if any(
            normalize_address(r.address) == normalize_address(address)
            for r in existing
        ):
            raise RecipientError("This address is already saved")
        if any(r.name.lower() == clean_name.lower() for r in existing):
            raise RecipientError("A recipient with this name already exists")

        created_at = self.clock()
        recipient = Recipient(
            id=f"recipient_{created_at}_{uuid.uuid4().hex[:9]}",
            name=clean_name,
            address=address,
            created_at=created_at,
        )
        self._save([*existing, recipient])
        logger.info("Saved recipient %s (%s)", recipient.name, recipient.address)
        return recipient

    def delete(self, recipient_id: str) -> bool:
        """Remove a recipient by id; returns False if it was not saved."""
        existing = self.entries()
        remaining = [r for r in existing if r.id != recipient_id]
        if len(remaining) == len(existing):
            return False
        self._save(remaining)
        return True

    def touch(self, address: str) -> Optional[Recipient]:
        """Stamp ``last_used`` on the recipient with this address."""
        key = normalize_address(address)
        touched: Optional[Recipient] = None
        updated: list[Recipient] = []
        for recipient in self.entries():
            if normalize_address(recipient.address) == key:
                recipient = recipient.model_copy(update={"last_used": self.clock()})
                touched = recipient
            updated.append(recipient)
        if touched is not None:
            self._save(updated)
        return touched

    def get_by_address(self, address: str) -> Optional[Recipient]:
        key = normalize_address(address)
        return next(
            (r for r in self.entries() if normalize_address(r.address) == key), None
        )

    def search(self, query: str) -> list[Recipient]:
        """Substring match on name or address; a blank query returns all."""
        recipients = self.entries()
        q = (query or "").strip().lower()
        if not q:
            return recipients
        return [r for r in recipients if q in r.name.lower() or q in r.address.lower()]

    def _save(self, recipients: list[Recipient]) -> None:
        self.store.write(RECIPIENTS_KEY, [r.to_wire() for r in recipients])

"""Key-value row model: backs the recipient book and the activity log."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class StoredValue(Base):
    """One named list of JSON entries.

    Writers replace the whole list; the last writer wins.
    """

    __tablename__ = "stored_values"

    key: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
    value: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        size = len(self.value) if self.value else 0
        return f"<StoredValue(key={self.key!r}, entries={size})>"

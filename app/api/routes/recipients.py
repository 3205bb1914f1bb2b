"""Saved recipient (address book) endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging import get_logger
from app.schemas.recipient import Recipient, RecipientCreate
from app.services.storage.recipients import RecipientBook, RecipientError
from app.services.storage.store import SqlStore

logger = get_logger(__name__)

router = APIRouter()


def get_recipient_book(db: Session = Depends(get_db)) -> RecipientBook:
    return RecipientBook(SqlStore(db))


@router.get("", response_model=List[Recipient])
def list_recipients(
    q: Optional[str] = Query(None, description="Match on name or address"),
    book: RecipientBook = Depends(get_recipient_book),
) -> list[Recipient]:
    """List saved recipients, optionally filtered by a search string."""
    return book.search(q) if q else book.entries()


@router.post("", response_model=Recipient, status_code=201)
def add_recipient(
    body: RecipientCreate,
    book: RecipientBook = Depends(get_recipient_book),
) -> Recipient:
    """Save a new recipient."""
    try:
        return book.add(body.name, body.address)
    except RecipientError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{recipient_id}")
def delete_recipient(
    recipient_id: str,
    book: RecipientBook = Depends(get_recipient_book),
) -> dict:
    """Remove a saved recipient."""
    if not book.delete(recipient_id):
        raise HTTPException(
            status_code=404, detail=f"Recipient '{recipient_id}' not found"
        )
    return {"deleted": recipient_id}

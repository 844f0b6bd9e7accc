"""
Journal entry endpoints.

The API layer is thin: it opens the transaction, delegates to
PostingService, and lets LedgerError subclasses map to status
codes through the handler registered in main.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from school_ledger.models.base import get_db, transaction
from school_ledger.services.journal_service import JournalService
from school_ledger.services.posting_service import PostingService
from school_ledger.schemas.journal import (
    JournalEntryCreate,
    JournalEntryResponse,
    ReverseEntryRequest,
)

router = APIRouter(prefix="/journal", tags=["Journal"])


@router.post("/entries", response_model=JournalEntryResponse, status_code=201)
def post_entry(
    request: JournalEntryCreate,
    db: Session = Depends(get_db),
):
    """
    Post a journal entry and update the account balances.

    Lines must balance within each currency. Re-posting a
    reference returns the entry already stored under it.
    """
    with transaction(db):
        entry = PostingService(db).post(request)
    return entry


@router.post(
    "/entries/batch",
    response_model=list[JournalEntryResponse],
    status_code=201,
)
def post_entries_batch(
    requests: list[JournalEntryCreate],
    db: Session = Depends(get_db),
):
    """Post several entries in one transaction."""
    with transaction(db):
        entries = PostingService(db).post_batch(requests)
    return entries


@router.get("/entries", response_model=list[JournalEntryResponse])
def list_entries(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    """List journal entries, newest first."""
    return JournalService(db).list_entries(limit=limit, offset=offset)


@router.get("/entries/{entry_id}", response_model=JournalEntryResponse)
def get_entry(entry_id: int, db: Session = Depends(get_db)):
    return JournalService(db).get_entry(entry_id)


@router.post(
    "/entries/{entry_id}/reverse",
    response_model=JournalEntryResponse,
    status_code=201,
)
def reverse_entry(
    entry_id: int,
    request: ReverseEntryRequest | None = None,
    db: Session = Depends(get_db),
):
    """Post a reversing entry. Posted entries are never edited."""
    with transaction(db):
        reversal = PostingService(db).reverse(entry_id, request)
    return reversal

"""
Posting service: the single entry point for calling modules.

Fee payments, expenses, payroll runs, transport fees and
cash/bank transfers post through here. One call stores the
journal entry and updates the account balances, so no caller
can record an entry and forget the balances.

Wrap each call in models.base.transaction (or commit/rollback
yourself): header, lines and balance updates then become
visible together or not at all.
"""

import logging

from sqlalchemy.orm import Session

from school_ledger.models.journal_entry import JournalEntry
from school_ledger.schemas.journal import JournalEntryCreate, ReverseEntryRequest
from school_ledger.services.balance_service import BalanceService
from school_ledger.services.journal_service import JournalService

logger = logging.getLogger(__name__)


class PostingService:

    def __init__(self, db: Session):
        self.db = db
        self.journal = JournalService(db)
        self.balances = BalanceService(db)

    def post(self, request: JournalEntryCreate) -> JournalEntry:
        """
        Store a journal entry and apply it to the balances.

        Re-posting a reference that already exists returns the
        stored entry and leaves the balances alone.
        """
        existing = self._already_posted(request)
        if existing is not None:
            return existing

        entry = self.journal.post_entry(request)
        self.balances.apply_entry(entry.id)
        return entry

    def post_batch(self, requests: list[JournalEntryCreate]) -> list[JournalEntry]:
        """
        Store several entries, then update the balances once per entry.

        Entries whose reference was already posted (before or
        earlier in the same batch) are returned but not applied
        again.
        """
        entries = []
        new_ids = []
        for request in requests:
            existing = self._already_posted(request)
            if existing is not None:
                entries.append(existing)
                continue
            entry = self.journal.post_entry(request)
            entries.append(entry)
            new_ids.append(entry.id)

        self.balances.apply_entries(new_ids)
        logger.info(
            "Posted batch of %d entries (%d new)", len(entries), len(new_ids)
        )
        return entries

    def reverse(
        self, entry_id: int, request: ReverseEntryRequest | None = None
    ) -> JournalEntry:
        """Post the reversal of an entry and apply it to the balances."""
        reversal = self.journal.reverse_entry(entry_id, request)
        self.balances.apply_entry(reversal.id)
        return reversal

    def recalculate(self) -> dict:
        return self.balances.recalculate_all()

    def _already_posted(self, request: JournalEntryCreate) -> JournalEntry | None:
        if not request.reference:
            return None
        existing = self.journal.get_by_reference(request.reference)
        if existing is not None:
            logger.info(
                "Skipping reference %s: already posted as entry %s",
                request.reference, existing.id,
            )
        return existing

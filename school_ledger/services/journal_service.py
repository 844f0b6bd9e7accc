"""
Journal service: the journal entry store.

This service enforces the posting rules:
1. An entry has at least one line and a description
2. No line carries a negative debit or credit
3. Within every currency, total debits equal total credits
4. Every referenced account and currency exists and is active
5. Entries are append-only; corrections are reversals

Posting here does not touch account balances. Use
PostingService to post and update balances in one call, or
call BalanceService.apply_entry yourself after a batch.
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from school_ledger.config import get_settings
from school_ledger.exceptions import NotFoundError, StorageError, ValidationError
from school_ledger.models.chart_account import Account
from school_ledger.models.currency import Currency
from school_ledger.models.enums import AuditEvent
from school_ledger.models.journal_entry import JournalEntry, JournalEntryLine
from school_ledger.money import to_cents
from school_ledger.schemas.journal import (
    DESCRIPTION_MAX_LENGTH,
    REFERENCE_MAX_LENGTH,
    JournalEntryCreate,
    ReverseEntryRequest,
)
from school_ledger.services.audit import record_event

logger = logging.getLogger(__name__)


@dataclass
class _Line:
    """A request line with its currency resolved."""
    account_id: int
    currency_id: int
    debit: Decimal
    credit: Decimal
    description: str | None


def generate_reference(prefix: str = "JE") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:16].upper()}"


def reversal_reference(reference: str) -> str:
    """
    Default reference of the entry reversing `reference`.

    REV-<reference> when it fits the column, otherwise a fresh
    generated REV- reference.
    """
    candidate = f"REV-{reference}"
    if len(candidate) <= REFERENCE_MAX_LENGTH:
        return candidate
    return generate_reference("REV")


class JournalService:
    """
    Validates and stores journal entries.

    The service takes a database session as a constructor
    argument, so the caller controls the transaction boundary.
    """

    def __init__(self, db: Session, tolerance: Decimal | None = None):
        settings = get_settings()
        self.db = db
        self.tolerance = (
            tolerance if tolerance is not None else settings.BALANCE_TOLERANCE
        )
        self.default_currency_id = settings.DEFAULT_CURRENCY_ID

    # --- Posting ---

    def post_entry(self, request: JournalEntryCreate) -> JournalEntry:
        """
        Validate and store a journal entry with its lines.

        If an entry with the same reference already exists it is
        returned unchanged (idempotent re-submission). Nothing is
        written unless every check passes. Database failures are
        raised as StorageError; the caller must roll back.
        """
        if request.reference:
            existing = self.get_by_reference(request.reference)
            if existing is not None:
                logger.info(
                    "Reference %s already posted as entry %s",
                    request.reference, existing.id,
                )
                return existing

        return self._store(request)

    def reverse_entry(
        self, entry_id: int, request: ReverseEntryRequest | None = None
    ) -> JournalEntry:
        """
        Post an entry that cancels an existing one.

        Each line of the original is copied with debit and
        credit swapped. An entry can be reversed only once, and a
        reversal cannot itself be reversed.
        """
        request = request or ReverseEntryRequest()
        original = self.get_entry(entry_id)

        if original.reverses_entry_id is not None:
            raise ValidationError(
                f"Entry {original.reference} is a reversal and cannot be reversed"
            )

        already = self.db.execute(
            select(JournalEntry.reference).where(
                JournalEntry.reverses_entry_id == original.id
            )
        ).scalar_one_or_none()
        if already is not None:
            raise ValidationError(
                f"Entry {original.reference} was already reversed by {already}"
            )

        try:
            reversal = JournalEntryCreate(
                description=(
                    request.description
                    or f"Reversal of {original.reference}"[:DESCRIPTION_MAX_LENGTH]
                ),
                reference=request.reference or reversal_reference(original.reference),
                entry_date=request.entry_date,
                journal_id=original.journal_id,
                created_by=request.created_by,
                lines=[
                    {
                        "account_id": line.account_id,
                        "currency_id": line.currency_id,
                        "debit": line.credit,
                        "credit": line.debit,
                        "description": line.description,
                    }
                    for line in original.lines
                ],
            )
        except PydanticValidationError as e:
            raise ValidationError(
                f"Cannot build reversal of {original.reference}: {e}"
            ) from e

        entry = self._store(reversal, reverses_entry_id=original.id)
        record_event(
            self.db, AuditEvent.ENTRY_REVERSED,
            entry_id=original.id, reversal_id=entry.id,
        )
        logger.info("Entry %s reversed by %s", original.reference, entry.reference)
        return entry

    def _store(
        self, request: JournalEntryCreate, reverses_entry_id: int | None = None
    ) -> JournalEntry:
        lines = self._resolve_lines(request)
        self._validate(request, lines)

        try:
            entry = JournalEntry(
                description=request.description.strip(),
                reference=request.reference or generate_reference(),
                entry_date=request.entry_date or date.today(),
                journal_id=request.journal_id,
                created_by=request.created_by,
                reverses_entry_id=reverses_entry_id,
            )
            self.db.add(entry)
            self.db.flush()

            self._insert_lines(entry, lines)
            self.db.flush()
        except SQLAlchemyError as e:
            logger.exception("Failed to store journal entry '%s'", request.description)
            raise StorageError(f"Failed to record journal entry: {e}") from e

        record_event(
            self.db, AuditEvent.ENTRY_POSTED,
            entry_id=entry.id, reference=entry.reference, lines=len(lines),
        )
        logger.info(
            "Posted journal entry %s (id=%s, %d lines)",
            entry.reference, entry.id, len(lines),
        )
        return entry

    def _insert_lines(self, entry: JournalEntry, lines: list[_Line]) -> None:
        for line in lines:
            entry.lines.append(JournalEntryLine(
                account_id=line.account_id,
                currency_id=line.currency_id,
                debit=line.debit,
                credit=line.credit,
                description=line.description,
            ))
            self.db.flush()

    # --- Validation ---

    def _resolve_lines(self, request: JournalEntryCreate) -> list[_Line]:
        header_currency = request.currency_id or self.default_currency_id
        return [
            _Line(
                account_id=line.account_id,
                currency_id=line.currency_id or header_currency,
                debit=to_cents(line.debit),
                credit=to_cents(line.credit),
                description=line.description,
            )
            for line in request.lines
        ]

    def _validate(self, request: JournalEntryCreate, lines: list[_Line]) -> None:
        if not request.description or not request.description.strip():
            raise ValidationError("Journal entry description is required")

        if not lines:
            raise ValidationError("Journal entry must have at least one line")

        for position, line in enumerate(lines, start=1):
            if line.debit < 0 or line.credit < 0:
                raise ValidationError(
                    f"Line {position}: debit and credit must not be negative"
                )

        # Balance rule, evaluated per currency
        totals: dict[int, list[Decimal]] = defaultdict(
            lambda: [Decimal("0"), Decimal("0")]
        )
        for line in lines:
            totals[line.currency_id][0] += line.debit
            totals[line.currency_id][1] += line.credit

        for currency_id, (debits, credits) in totals.items():
            if abs(debits - credits) >= self.tolerance:
                logger.warning(
                    "Rejected unbalanced entry '%s': currency %s debits=%s credits=%s",
                    request.description, currency_id, debits, credits,
                )
                raise ValidationError(
                    f"Entry does not balance in currency {currency_id}: "
                    f"debits={debits}, credits={credits}"
                )

        self._check_accounts({line.account_id for line in lines})
        self._check_currencies(set(totals))

    def _check_accounts(self, account_ids: set[int]) -> None:
        accounts = self.db.execute(
            select(Account).where(Account.id.in_(account_ids))
        ).scalars().all()
        by_id = {a.id: a for a in accounts}

        missing = account_ids - set(by_id)
        if missing:
            raise NotFoundError("Account", min(missing))

        for account in by_id.values():
            if not account.is_active:
                raise ValidationError(f"Account {account.code} is not active")

    def _check_currencies(self, currency_ids: set[int]) -> None:
        currencies = self.db.execute(
            select(Currency).where(Currency.id.in_(currency_ids))
        ).scalars().all()
        by_id = {c.id: c for c in currencies}

        missing = currency_ids - set(by_id)
        if missing:
            raise NotFoundError("Currency", min(missing))

        for currency in by_id.values():
            if not currency.is_active:
                raise ValidationError(f"Currency {currency.code} is not active")

    # --- Reads ---

    def get_entry(self, entry_id: int) -> JournalEntry:
        entry = self.db.get(JournalEntry, entry_id)
        if not entry:
            raise NotFoundError("Journal entry", entry_id)
        return entry

    def get_by_reference(self, reference: str) -> JournalEntry | None:
        return self.db.execute(
            select(JournalEntry).where(JournalEntry.reference == reference)
        ).scalar_one_or_none()

    def list_entries(self, limit: int = 50, offset: int = 0) -> list[JournalEntry]:
        """Return entries newest first, with their lines."""
        entries = self.db.execute(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .order_by(JournalEntry.entry_date.desc(), JournalEntry.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        return list(entries)

    def get_lines_for_account(
        self,
        account_id: int,
        currency_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[JournalEntryLine]:
        """
        Ledger drill-down: the lines posted to one account, newest first.

        Raises NotFoundError if the account does not exist.
        """
        if not self.db.get(Account, account_id):
            raise NotFoundError("Account", account_id)

        query = (
            select(JournalEntryLine)
            .join(JournalEntryLine.journal_entry)
            .options(joinedload(JournalEntryLine.journal_entry))
            .where(JournalEntryLine.account_id == account_id)
            .order_by(JournalEntry.entry_date.desc(), JournalEntryLine.id.desc())
            .limit(limit)
            .offset(offset)
        )
        if currency_id is not None:
            query = query.where(JournalEntryLine.currency_id == currency_id)
        return list(self.db.execute(query).scalars().all())

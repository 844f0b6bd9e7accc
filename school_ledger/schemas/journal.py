"""
Pydantic schemas for journal entries.

These describe the shape of a posting. Business rules (an
entry must balance per currency, amounts must not be
negative, accounts must exist) are enforced by
JournalService so that programmatic callers get the same
checks as HTTP clients.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from school_ledger.money import to_cents

# Column sizes of journal_entries
DESCRIPTION_MAX_LENGTH = 255
REFERENCE_MAX_LENGTH = 100


class JournalLineCreate(BaseModel):
    """One line of a journal entry."""
    account_id: int
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    currency_id: int | None = None
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("debit", "credit")
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        return to_cents(v)


class JournalEntryCreate(BaseModel):
    """
    A complete posting: header plus lines.

    currency_id on the header is applied to any line that does
    not name its own currency. reference doubles as the
    idempotency key: re-posting a reference returns the entry
    already stored under it.
    """
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH)
    reference: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    entry_date: date | None = None
    journal_id: int | None = None
    created_by: int | None = None
    currency_id: int | None = None
    lines: list[JournalLineCreate] = Field(default_factory=list)


class ReverseEntryRequest(BaseModel):
    """Request to post the reversal of an existing entry."""
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    reference: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    entry_date: date | None = None
    created_by: int | None = None


class JournalLineResponse(BaseModel):
    id: int
    account_id: int
    currency_id: int
    debit: Decimal
    credit: Decimal
    description: str | None

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: int
    description: str
    reference: str
    entry_date: date
    journal_id: int | None
    created_by: int | None
    reverses_entry_id: int | None
    created_at: datetime
    lines: list[JournalLineResponse]

    model_config = {"from_attributes": True}


class LedgerLineResponse(BaseModel):
    """A journal line with its entry header, for ledger drill-down."""
    line_id: int
    journal_entry_id: int
    reference: str
    entry_date: date
    description: str
    account_id: int
    currency_id: int
    debit: Decimal
    credit: Decimal

"""
Journal entry and journal entry line models.

A journal entry is one business transaction (a fee payment,
an expense, a cash-to-bank transfer). Its lines carry the
debits and credits. Within each currency, the debits of an
entry's lines must equal its credits. That rule is enforced
by JournalService, not by the model.

Entries are append-only. A mistake is corrected by posting
a reversal that points back at the original entry.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Numeric, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_ledger.models.base import Base


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    reference: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    entry_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=date.today
    )
    # Originating book (fees, payroll, transport, ...). The book
    # catalogue belongs to the calling modules.
    journal_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reverses_entry_id: Mapped[int | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    lines: Mapped[list["JournalEntryLine"]] = relationship(
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.reference} ({len(self.lines)} lines)>"


class JournalEntryLine(Base):
    """One debit and/or credit against a single account and currency."""

    __tablename__ = "journal_entry_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("chart_of_accounts.id"), nullable=False, index=True
    )
    currency_id: Mapped[int] = mapped_column(
        ForeignKey("currencies.id"), nullable=False, index=True
    )
    debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0")
    )
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    journal_entry: Mapped["JournalEntry"] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<JournalEntryLine account={self.account_id} "
            f"Dr {self.debit} Cr {self.credit}>"
        )

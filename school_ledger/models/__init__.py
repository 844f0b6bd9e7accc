"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from school_ledger.models.base import Base
from school_ledger.models.enums import AccountType, AuditEvent
from school_ledger.models.audit_log import AuditLog
from school_ledger.models.currency import Currency
from school_ledger.models.chart_account import Account
from school_ledger.models.journal_entry import JournalEntry, JournalEntryLine
from school_ledger.models.account_balance import AccountBalance

__all__ = [
    "Base",
    "AccountType",
    "AuditEvent",
    "AuditLog",
    "Currency",
    "Account",
    "JournalEntry",
    "JournalEntryLine",
    "AccountBalance",
]

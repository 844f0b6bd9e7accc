"""
Shared enumerations for database models.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class AuditEvent(str, enum.Enum):
    """Ledger events recorded in the audit log."""
    ENTRY_POSTED = "ENTRY_POSTED"
    ENTRY_REVERSED = "ENTRY_REVERSED"
    BALANCES_RECALCULATED = "BALANCES_RECALCULATED"
    BALANCE_DRIFT_DETECTED = "BALANCE_DRIFT_DETECTED"

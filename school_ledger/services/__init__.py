"""Business logic services."""

from school_ledger.services.currency_service import CurrencyService
from school_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from school_ledger.services.journal_service import JournalService
from school_ledger.services.balance_service import BalanceService
from school_ledger.services.posting_service import PostingService

__all__ = [
    "CurrencyService",
    "ChartOfAccountsService",
    "JournalService",
    "BalanceService",
    "PostingService",
]

"""
Pydantic schemas for balance queries and maintenance.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from school_ledger.models.enums import AccountType


class AccountBalanceResponse(BaseModel):
    """Balance of one account in one currency (signed debit - credit)."""
    account_id: int
    account_code: str
    account_type: AccountType
    currency_id: int
    balance: Decimal


class TrialBalanceRow(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    debit: Decimal
    credit: Decimal


class TrialBalanceResponse(BaseModel):
    currency_id: int
    as_of: date
    rows: list[TrialBalanceRow]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool


class RecalculationResponse(BaseModel):
    deleted: int
    created: int


class DriftItem(BaseModel):
    account_id: int
    currency_id: int
    materialized: Decimal
    expected: Decimal
    difference: Decimal


class DriftReport(BaseModel):
    is_consistent: bool
    checked: int
    drift: list[DriftItem]

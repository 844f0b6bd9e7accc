"""
Balance endpoints.

Reads come from the materialized account_balances table.
Recalculation and drift checks are administrative operations.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from school_ledger.models.base import get_db, transaction
from school_ledger.services.balance_service import BalanceService
from school_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from school_ledger.services.journal_service import JournalService
from school_ledger.schemas.balance import (
    AccountBalanceResponse,
    TrialBalanceResponse,
    RecalculationResponse,
    DriftReport,
)
from school_ledger.schemas.journal import LedgerLineResponse

router = APIRouter(prefix="/balances", tags=["Balances"])


@router.get(
    "/accounts/{account_id}",
    response_model=list[AccountBalanceResponse],
)
def get_account_balance(
    account_id: int,
    currency_id: int | None = None,
    db: Session = Depends(get_db),
):
    """
    Balance of an account, signed as debit - credit.

    With currency_id, returns that single currency (zero if
    never posted). Without it, returns every currency the
    account holds a balance in.
    """
    account = ChartOfAccountsService(db).get_account(account_id)
    service = BalanceService(db)

    if currency_id is not None:
        by_currency = {currency_id: service.get_balance(account_id, currency_id)}
    else:
        by_currency = service.get_account_balances(account_id)

    return [
        AccountBalanceResponse(
            account_id=account.id,
            account_code=account.code,
            account_type=account.account_type,
            currency_id=cid,
            balance=balance,
        )
        for cid, balance in by_currency.items()
    ]


@router.get(
    "/accounts/{account_id}/lines",
    response_model=list[LedgerLineResponse],
)
def get_account_lines(
    account_id: int,
    currency_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    """Journal lines posted to an account, newest first."""
    lines = JournalService(db).get_lines_for_account(
        account_id, currency_id=currency_id, limit=limit, offset=offset
    )
    return [
        LedgerLineResponse(
            line_id=line.id,
            journal_entry_id=line.journal_entry_id,
            reference=line.journal_entry.reference,
            entry_date=line.journal_entry.entry_date,
            description=line.description or line.journal_entry.description,
            account_id=line.account_id,
            currency_id=line.currency_id,
            debit=line.debit,
            credit=line.credit,
        )
        for line in lines
    ]


@router.get("/trial-balance", response_model=TrialBalanceResponse)
def get_trial_balance(
    currency_id: int,
    db: Session = Depends(get_db),
):
    return BalanceService(db).get_trial_balance(currency_id)


@router.post("/recalculate", response_model=RecalculationResponse)
def recalculate_balances(db: Session = Depends(get_db)):
    """
    Rebuild every balance from the journal lines.

    Blocks new postings while it runs.
    """
    with transaction(db):
        summary = BalanceService(db).recalculate_all()
    return summary


@router.post("/drift-check", response_model=DriftReport)
def check_drift(db: Session = Depends(get_db)):
    """
    Report balances that no longer match the journal lines.

    Detected drift is written to the audit log, so this is a
    POST. Nothing is repaired; call /balances/recalculate.
    """
    with transaction(db):
        report = BalanceService(db).check_drift()
    return report

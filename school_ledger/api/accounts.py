"""
Chart of accounts endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_ledger.models.base import get_db, transaction
from school_ledger.models.enums import AccountType
from school_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from school_ledger.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
)

router = APIRouter(prefix="/accounts", tags=["Chart of Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """
    Add an account to the chart of accounts.

    Accounts must exist before lines can be posted to them.
    """
    with transaction(db):
        account = ChartOfAccountsService(db).create_account(request)
    return account


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    account_type: AccountType | None = None,
    active_only: bool = False,
    db: Session = Depends(get_db),
):
    """List accounts ordered by code."""
    return ChartOfAccountsService(db).list_accounts(account_type, active_only)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(account_id: int, db: Session = Depends(get_db)):
    return ChartOfAccountsService(db).get_account(account_id)


@router.get("/{account_id}/children", response_model=list[AccountResponse])
def get_children(account_id: int, db: Session = Depends(get_db)):
    return ChartOfAccountsService(db).get_children(account_id)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    """Rename, re-parent, activate or deactivate an account."""
    with transaction(db):
        account = ChartOfAccountsService(db).update_account(account_id, request)
    return account

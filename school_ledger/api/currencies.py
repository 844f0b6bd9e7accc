"""
Currency registry endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_ledger.models.base import get_db, transaction
from school_ledger.services.currency_service import CurrencyService
from school_ledger.schemas.currency import CurrencyCreate, CurrencyResponse

router = APIRouter(prefix="/currencies", tags=["Currencies"])


@router.post("", response_model=CurrencyResponse, status_code=201)
def create_currency(
    request: CurrencyCreate,
    db: Session = Depends(get_db),
):
    """Register a currency."""
    with transaction(db):
        currency = CurrencyService(db).create_currency(request)
    return currency


@router.get("", response_model=list[CurrencyResponse])
def list_currencies(db: Session = Depends(get_db)):
    return CurrencyService(db).list_currencies()


@router.get("/{currency_id}", response_model=CurrencyResponse)
def get_currency(currency_id: int, db: Session = Depends(get_db)):
    return CurrencyService(db).get_currency(currency_id)

"""
Currency registry service.

Currencies are reference data: created at setup time and
read by the ledger, never changed by postings.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from school_ledger.exceptions import NotFoundError, ValidationError
from school_ledger.models.currency import Currency
from school_ledger.schemas.currency import CurrencyCreate

logger = logging.getLogger(__name__)


class CurrencyService:

    def __init__(self, db: Session):
        self.db = db

    def create_currency(self, request: CurrencyCreate) -> Currency:
        """
        Register a new currency.

        Raises ValidationError if the code already exists. Marking
        the new currency as base clears the flag everywhere else.
        """
        if self.get_by_code(request.code) is not None:
            raise ValidationError(
                f"Currency with code '{request.code}' already exists"
            )

        if request.is_base:
            self.db.execute(
                update(Currency)
                .where(Currency.is_base.is_(True))
                .values(is_base=False)
            )

        currency = Currency(
            code=request.code,
            name=request.name,
            symbol=request.symbol,
            is_base=request.is_base,
        )
        self.db.add(currency)
        self.db.flush()
        logger.info("Registered currency %s (id=%s)", currency.code, currency.id)
        return currency

    def get_currency(self, currency_id: int) -> Currency:
        currency = self.db.get(Currency, currency_id)
        if not currency:
            raise NotFoundError("Currency", currency_id)
        return currency

    def get_by_code(self, code: str) -> Currency | None:
        return self.db.execute(
            select(Currency).where(Currency.code == code.upper())
        ).scalar_one_or_none()

    def get_base_currency(self) -> Currency | None:
        return self.db.execute(
            select(Currency).where(Currency.is_base.is_(True)).limit(1)
        ).scalar_one_or_none()

    def list_currencies(self) -> list[Currency]:
        currencies = self.db.execute(
            select(Currency).order_by(Currency.code)
        ).scalars().all()
        return list(currencies)

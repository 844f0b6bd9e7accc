"""
Materialized account balance model.

A cache of sum(debit) - sum(credit) per (account, currency),
kept current by BalanceService on every posting and rebuilt
from the journal lines by a full recalculation.

There is exactly one row per (account, currency). as_of_date
is the date of the last change, not a point in a history.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_ledger.models.base import Base


class AccountBalance(Base):
    __tablename__ = "account_balances"
    __table_args__ = (
        UniqueConstraint(
            "account_id", "currency_id", name="uq_account_balance_account_currency"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("chart_of_accounts.id"), nullable=False, index=True
    )
    currency_id: Mapped[int] = mapped_column(
        ForeignKey("currencies.id"), nullable=False
    )
    balance: Mapped[Decimal] = mapped_column(Numeric(19, 2), nullable=False)
    as_of_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=date.today
    )

    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<AccountBalance account={self.account_id} "
            f"currency={self.currency_id} {self.balance}>"
        )

"""
Balance service: maintains the materialized account balances.

account_balances holds, per (account, currency), the signed
sum of debit - credit over every journal line. Two paths
write it:

- apply_entry: the incremental path, run in the same
  transaction as the posting it reflects.
- recalculate_all: the repair path, which throws the table
  away and rebuilds it from the journal lines.

The lines are the source of truth. When the two paths
disagree, the recalculation is right.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy import select, update, delete, insert, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from school_ledger.config import get_settings
from school_ledger.exceptions import NotFoundError, StorageError
from school_ledger.models.account_balance import AccountBalance
from school_ledger.models.chart_account import Account
from school_ledger.models.enums import AuditEvent
from school_ledger.models.journal_entry import JournalEntry, JournalEntryLine
from school_ledger.money import ZERO, to_cents
from school_ledger.services import locking
from school_ledger.services.audit import record_event

logger = logging.getLogger(__name__)

balances = AccountBalance.__table__

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BalanceService:
    """
    Incremental updates, full recalculation and balance reads.

    Like every service, it works inside the caller's session
    and never commits.
    """

    def __init__(self, db: Session, tolerance: Decimal | None = None):
        settings = get_settings()
        self.db = db
        self.tolerance = (
            tolerance if tolerance is not None else settings.BALANCE_TOLERANCE
        )

    # --- Incremental path ---

    def apply_entry(self, journal_entry_id: int) -> int:
        """
        Add the effect of one posted journal entry to the balances.

        Each line contributes debit - credit to its (account,
        currency) pair. Lines of the same pair are summed first,
        and pairs whose net delta is below the tolerance are
        skipped. Rows are then locked and updated in sorted
        (account, currency) order, so two postings touching the
        same accounts always lock them in the same order. The
        row is created on first use. The entry is trusted to
        balance, it is not re-validated.

        Returns the number of pairs applied. Raises NotFoundError
        for an unknown entry and StorageError on database failure,
        in which case the caller must roll back the whole posting.
        """
        if not self.db.get(JournalEntry, journal_entry_id):
            raise NotFoundError("Journal entry", journal_entry_id)

        try:
            locking.acquire_shared(self.db)

            lines = self.db.execute(
                select(
                    JournalEntryLine.account_id,
                    JournalEntryLine.currency_id,
                    JournalEntryLine.debit,
                    JournalEntryLine.credit,
                )
                .where(JournalEntryLine.journal_entry_id == journal_entry_id)
            ).all()

            if not lines:
                logger.warning("Journal entry %s has no lines", journal_entry_id)
                return 0

            deltas: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
            for account_id, currency_id, debit, credit in lines:
                deltas[(account_id, currency_id)] += to_cents(debit) - to_cents(credit)

            applied = 0
            for (account_id, currency_id), delta in sorted(deltas.items()):
                if abs(delta) < self.tolerance:
                    logger.debug(
                        "Skipping account %s: no significant change", account_id
                    )
                    continue
                self._add_to_balance(account_id, currency_id, delta)
                applied += 1
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to update balances for journal entry %s", journal_entry_id
            )
            raise StorageError(
                f"Failed to update balances for journal entry {journal_entry_id}"
            ) from e

        logger.info(
            "Applied %d account/currency pairs of journal entry %s to balances",
            applied, journal_entry_id,
        )
        return applied

    def apply_entries(self, journal_entry_ids: list[int]) -> int:
        """Apply several entries in order. Returns total pairs applied."""
        return sum(self.apply_entry(entry_id) for entry_id in journal_entry_ids)

    def _add_to_balance(self, account_id: int, currency_id: int, delta: Decimal) -> None:
        """
        Increment one balance row by delta.

        The row is locked with SELECT ... FOR UPDATE and the new
        value is computed by the database (balance = balance +
        delta), never from a value read earlier in Python, so two
        postings to the same row cannot overwrite each other. A
        missing row is inserted with ON CONFLICT DO UPDATE, which
        covers two sessions creating it at the same time.
        """
        today = date.today()
        current = self.db.execute(
            select(balances.c.id, balances.c.balance)
            .where(
                balances.c.account_id == account_id,
                balances.c.currency_id == currency_id,
            )
            .order_by(balances.c.as_of_date.desc())
            .limit(1)
            .with_for_update()
        ).first()

        if current is not None:
            self.db.execute(
                update(balances)
                .where(balances.c.id == current.id)
                .values(balance=balances.c.balance + delta, as_of_date=today)
            )
            logger.debug(
                "Balance account=%s currency=%s: %s %+.2f",
                account_id, currency_id, current.balance, delta,
            )
            return

        self.db.execute(self._insert_or_increment(account_id, currency_id, delta, today))
        logger.debug(
            "Created balance account=%s currency=%s: %s",
            account_id, currency_id, delta,
        )

    def _insert_or_increment(self, account_id, currency_id, delta, as_of):
        values = {
            "account_id": account_id,
            "currency_id": currency_id,
            "balance": delta,
            "as_of_date": as_of,
        }
        dialect_insert = UPSERT_INSERTS.get(self.db.get_bind().dialect.name)
        if dialect_insert is None:
            return insert(balances).values(**values)

        stmt = dialect_insert(balances).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[balances.c.account_id, balances.c.currency_id],
            set_={
                "balance": balances.c.balance + stmt.excluded.balance,
                "as_of_date": stmt.excluded.as_of_date,
            },
        )

    # --- Full recalculation ---

    def recalculate_all(self) -> dict:
        """
        Rebuild every balance from the complete journal line history.

        Takes the exclusive maintenance lock so no posting can
        interleave, deletes all rows, then inserts one row per
        (account, currency) whose net is at least the tolerance.
        Pairs that net to zero get no row.

        Returns {"deleted": n, "created": m}.
        """
        logger.info("Starting full account balance recalculation")
        try:
            locking.acquire_exclusive(self.db)

            deleted = self.db.execute(delete(balances)).rowcount or 0

            rows = self._line_totals()
            today = date.today()
            new_rows = [
                {
                    "account_id": account_id,
                    "currency_id": currency_id,
                    "balance": net,
                    "as_of_date": today,
                }
                for (account_id, currency_id), net in rows.items()
                if abs(net) >= self.tolerance
            ]
            if new_rows:
                self.db.execute(insert(balances), new_rows)
            self.db.flush()
        except SQLAlchemyError as e:
            logger.exception("Full balance recalculation failed")
            raise StorageError("Failed to recalculate account balances") from e

        record_event(
            self.db, AuditEvent.BALANCES_RECALCULATED,
            deleted=deleted, created=len(new_rows),
        )
        logger.info(
            "Recalculated balances: %d rows deleted, %d created",
            deleted, len(new_rows),
        )
        return {"deleted": deleted, "created": len(new_rows)}

    def _line_totals(self) -> dict[tuple[int, int], Decimal]:
        """Net debit - credit per (account, currency) over all lines."""
        rows = self.db.execute(
            select(
                JournalEntryLine.account_id,
                JournalEntryLine.currency_id,
                func.coalesce(func.sum(JournalEntryLine.debit), 0),
                func.coalesce(func.sum(JournalEntryLine.credit), 0),
            ).group_by(JournalEntryLine.account_id, JournalEntryLine.currency_id)
        ).all()
        return {
            (account_id, currency_id): to_cents(debits) - to_cents(credits)
            for account_id, currency_id, debits, credits in rows
        }

    # --- Reads ---

    def get_balance(self, account_id: int, currency_id: int) -> Decimal:
        """
        Current balance of an account in one currency.

        Zero when no row exists: the account was never posted to
        in that currency or nets to zero. Raises NotFoundError
        for an unknown account.
        """
        if not self.db.get(Account, account_id):
            raise NotFoundError("Account", account_id)

        balance = self.db.execute(
            select(balances.c.balance)
            .where(
                balances.c.account_id == account_id,
                balances.c.currency_id == currency_id,
            )
            .order_by(balances.c.as_of_date.desc())
            .limit(1)
        ).scalar_one_or_none()
        return to_cents(balance) if balance is not None else ZERO

    def get_account_balances(self, account_id: int) -> dict[int, Decimal]:
        """
        Every stored balance of an account, keyed by currency id.

        A pair that was posted to and later netted back to zero
        keeps its 0.00 row until the next full recalculation.
        """
        if not self.db.get(Account, account_id):
            raise NotFoundError("Account", account_id)

        rows = self.db.execute(
            select(balances.c.currency_id, balances.c.balance)
            .where(balances.c.account_id == account_id)
            .order_by(balances.c.currency_id)
        ).all()
        return {currency_id: to_cents(balance) for currency_id, balance in rows}

    def get_trial_balance(self, currency_id: int) -> dict:
        """
        Trial balance of one currency from the materialized balances.

        Positive balances are listed on the debit side, negative
        ones on the credit side. Because every entry balances,
        the two totals agree unless the balances have drifted.
        """
        rows = self.db.execute(
            select(
                Account.id, Account.code, Account.name, Account.account_type,
                balances.c.balance,
            )
            .join(balances, balances.c.account_id == Account.id)
            .where(balances.c.currency_id == currency_id)
            .order_by(Account.code)
        ).all()

        report_rows = []
        total_debit = ZERO
        total_credit = ZERO
        for account_id, code, name, account_type, balance in rows:
            balance = to_cents(balance)
            debit = balance if balance > 0 else ZERO
            credit = -balance if balance < 0 else ZERO
            total_debit += debit
            total_credit += credit
            report_rows.append({
                "account_id": account_id,
                "account_code": code,
                "account_name": name,
                "account_type": account_type,
                "debit": debit,
                "credit": credit,
            })

        return {
            "currency_id": currency_id,
            "as_of": date.today(),
            "rows": report_rows,
            "total_debit": total_debit,
            "total_credit": total_credit,
            "is_balanced": abs(total_debit - total_credit) < self.tolerance,
        }

    def check_drift(self) -> dict:
        """
        Compare the materialized balances with the journal lines.

        Returns every (account, currency) whose stored balance
        differs from the recomputed one by at least the tolerance.
        Drift is logged and audited but not repaired; run
        recalculate_all for that.
        """
        expected = self._line_totals()
        materialized = {
            (account_id, currency_id): to_cents(balance)
            for account_id, currency_id, balance in self.db.execute(
                select(balances.c.account_id, balances.c.currency_id, balances.c.balance)
            ).all()
        }

        drift = []
        for key in sorted(set(expected) | set(materialized)):
            stored = materialized.get(key, ZERO)
            truth = expected.get(key, ZERO)
            if abs(stored - truth) >= self.tolerance:
                drift.append({
                    "account_id": key[0],
                    "currency_id": key[1],
                    "materialized": stored,
                    "expected": truth,
                    "difference": stored - truth,
                })

        if drift:
            logger.warning("Balance drift detected on %d account/currency pairs", len(drift))
            record_event(
                self.db, AuditEvent.BALANCE_DRIFT_DETECTED,
                pairs=[[d["account_id"], d["currency_id"]] for d in drift],
            )

        return {
            "is_consistent": not drift,
            "checked": len(set(expected) | set(materialized)),
            "drift": drift,
        }

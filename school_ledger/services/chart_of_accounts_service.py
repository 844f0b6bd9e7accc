"""
Chart of accounts service.

Calling modules (fees, payroll, expenses, transfers) resolve
the accounts they post to through this service, by code or by
name and type ("Cash on Hand" / ASSET).
"""

import logging

from sqlalchemy import select, exists
from sqlalchemy.orm import Session

from school_ledger.exceptions import NotFoundError, ValidationError
from school_ledger.models.chart_account import Account
from school_ledger.models.enums import AccountType
from school_ledger.models.journal_entry import JournalEntryLine
from school_ledger.schemas.account import AccountCreate, AccountUpdate

logger = logging.getLogger(__name__)


class ChartOfAccountsService:

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate) -> Account:
        """
        Add an account to the chart.

        Raises ValidationError if the code is taken and
        NotFoundError if the parent does not exist.
        """
        if self.get_by_code(request.code) is not None:
            raise ValidationError(
                f"Account with code '{request.code}' already exists"
            )

        if request.parent_id is not None:
            self.get_account(request.parent_id)

        account = Account(
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            parent_id=request.parent_id,
            is_active=request.is_active,
        )
        self.db.add(account)
        self.db.flush()
        logger.info(
            "Created account %s '%s' (%s)",
            account.code, account.name, account.account_type.value,
        )
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    def get_by_code(self, code: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.code == code)
        ).scalar_one_or_none()

    def find_account(
        self, name: str, account_type: AccountType
    ) -> Account:
        """
        Look up an active account by name and type.

        Raises NotFoundError when the chart has no such account,
        which calling modules report as a setup problem.
        """
        account = self.db.execute(
            select(Account)
            .where(
                Account.name == name,
                Account.account_type == account_type,
                Account.is_active.is_(True),
            )
            .order_by(Account.code)
            .limit(1)
        ).scalar_one_or_none()
        if not account:
            raise NotFoundError(f"{account_type.value} account '{name}'")
        return account

    def list_accounts(
        self,
        account_type: AccountType | None = None,
        active_only: bool = False,
    ) -> list[Account]:
        """Return accounts ordered by code."""
        query = select(Account).order_by(Account.code)
        if account_type is not None:
            query = query.where(Account.account_type == account_type)
        if active_only:
            query = query.where(Account.is_active.is_(True))
        return list(self.db.execute(query).scalars().all())

    def get_children(self, account_id: int) -> list[Account]:
        self.get_account(account_id)
        children = self.db.execute(
            select(Account)
            .where(Account.parent_id == account_id)
            .order_by(Account.code)
        ).scalars().all()
        return list(children)

    def has_postings(self, account_id: int) -> bool:
        return bool(self.db.execute(
            select(exists().where(JournalEntryLine.account_id == account_id))
        ).scalar())

    def update_account(self, account_id: int, request: AccountUpdate) -> Account:
        """
        Rename, re-parent, activate or deactivate an account.

        Code and type can be corrected only while no journal
        line references the account; afterwards they are fixed.
        """
        account = self.get_account(account_id)
        changes = request.model_dump(exclude_unset=True)

        new_code = changes.get("code")
        new_type = changes.get("account_type")
        code_changes = new_code is not None and new_code != account.code
        type_changes = new_type is not None and new_type != account.account_type

        if (code_changes or type_changes) and self.has_postings(account.id):
            raise ValidationError(
                f"Account {account.code} has postings: code and type are fixed"
            )

        if code_changes:
            if self.get_by_code(new_code) is not None:
                raise ValidationError(
                    f"Account with code '{new_code}' already exists"
                )
            account.code = new_code

        if type_changes:
            account.account_type = new_type

        if "parent_id" in changes:
            parent_id = changes["parent_id"]
            if parent_id is not None:
                self._check_parent(account, parent_id)
            account.parent_id = parent_id

        if changes.get("name") is not None:
            account.name = changes["name"]

        if changes.get("is_active") is not None:
            account.is_active = changes["is_active"]

        self.db.flush()
        logger.info("Updated account %s: %s", account.code, sorted(changes))
        return account

    def _check_parent(self, account: Account, parent_id: int) -> None:
        """Reject a parent that is the account itself or one of its descendants."""
        parent = self.get_account(parent_id)
        node = parent
        while node is not None:
            if node.id == account.id:
                raise ValidationError(
                    f"Account {parent.code} cannot be the parent of "
                    f"{account.code}: it would create a cycle"
                )
            node = node.parent

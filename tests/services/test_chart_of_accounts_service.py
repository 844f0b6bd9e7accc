"""
Tests for the chart of accounts.
"""

import pytest

from conftest import make_entry
from school_ledger.exceptions import NotFoundError, ValidationError
from school_ledger.models.enums import AccountType
from school_ledger.schemas.account import AccountCreate, AccountUpdate
from school_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from school_ledger.services.posting_service import PostingService


class TestCreateAccount:

    def test_create_account_succeeds(self, db_session):
        service = ChartOfAccountsService(db_session)
        account = service.create_account(AccountCreate(
            code="1010", name="Cash on Hand", account_type=AccountType.ASSET,
        ))
        db_session.commit()

        assert account.id is not None
        assert account.parent_id is None
        assert account.is_active is True

    def test_duplicate_code_rejected(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        with pytest.raises(ValidationError, match="already exists"):
            service.create_account(AccountCreate(
                code="1010", name="Petty Cash", account_type=AccountType.ASSET,
            ))

    def test_unknown_parent_rejected(self, db_session):
        service = ChartOfAccountsService(db_session)
        with pytest.raises(NotFoundError):
            service.create_account(AccountCreate(
                code="1010", name="Cash", account_type=AccountType.ASSET,
                parent_id=99,
            ))


class TestLookup:

    def test_find_by_name_and_type(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        account = service.find_account("Cash on Hand", AccountType.ASSET)
        assert account.id == chart.cash

    def test_find_ignores_inactive_accounts(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        service.update_account(chart.bank, AccountUpdate(is_active=False))
        db_session.commit()

        with pytest.raises(NotFoundError, match="Bank Account"):
            service.find_account("Bank Account", AccountType.ASSET)

    def test_find_checks_type(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        with pytest.raises(NotFoundError):
            service.find_account("Cash on Hand", AccountType.EXPENSE)

    def test_list_filters_by_type(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        income = service.list_accounts(account_type=AccountType.INCOME)
        assert [a.code for a in income] == ["4010", "4020"]

    def test_children(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        parent = service.get_by_code("1000")
        assert {a.id for a in service.get_children(parent.id)} == {
            chart.cash, chart.bank,
        }


class TestUpdateAccount:

    def test_rename(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        account = service.update_account(chart.cash, AccountUpdate(name="Cash Till"))
        db_session.commit()
        assert account.name == "Cash Till"

    def test_detach_from_parent(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        account = service.update_account(chart.cash, AccountUpdate(parent_id=None))
        db_session.commit()
        assert account.parent_id is None

    def test_absent_parent_field_keeps_parent(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        before = service.get_account(chart.cash).parent_id
        account = service.update_account(chart.cash, AccountUpdate(name="Till"))
        assert account.parent_id == before

    def test_cycle_rejected(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        parent = service.get_by_code("1000")

        with pytest.raises(ValidationError, match="cycle"):
            service.update_account(parent.id, AccountUpdate(parent_id=chart.cash))

    def test_self_parent_rejected(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        with pytest.raises(ValidationError, match="cycle"):
            service.update_account(chart.cash, AccountUpdate(parent_id=chart.cash))

    def test_has_postings(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        assert service.has_postings(chart.cash) is False

        PostingService(db_session).post(make_entry(
            (chart.cash, 10, 0), (chart.tuition, 0, 10),
        ))
        db_session.commit()

        assert service.has_postings(chart.cash) is True

    def test_code_and_type_editable_before_postings(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        account = service.update_account(chart.transport, AccountUpdate(
            code="4030", account_type=AccountType.LIABILITY,
        ))
        db_session.commit()

        assert account.code == "4030"
        assert account.account_type == AccountType.LIABILITY

    def test_code_and_type_fixed_after_postings(self, db_session, chart):
        PostingService(db_session).post(make_entry(
            (chart.cash, 10, 0), (chart.tuition, 0, 10),
        ))
        db_session.commit()
        service = ChartOfAccountsService(db_session)

        with pytest.raises(ValidationError, match="has postings"):
            service.update_account(chart.tuition, AccountUpdate(code="4099"))
        with pytest.raises(ValidationError, match="has postings"):
            service.update_account(
                chart.tuition, AccountUpdate(account_type=AccountType.EQUITY)
            )

    def test_unchanged_code_allowed_after_postings(self, db_session, chart):
        PostingService(db_session).post(make_entry(
            (chart.cash, 10, 0), (chart.tuition, 0, 10),
        ))
        db_session.commit()

        account = ChartOfAccountsService(db_session).update_account(
            chart.tuition, AccountUpdate(code="4010", name="School Fees"),
        )
        assert account.name == "School Fees"

    def test_new_code_must_be_unique(self, db_session, chart):
        service = ChartOfAccountsService(db_session)
        with pytest.raises(ValidationError, match="already exists"):
            service.update_account(chart.transport, AccountUpdate(code="4010"))

"""
Shared test fixtures.

Sets up an isolated test database so tests never touch the
real one. Tables are created before each test and dropped
after it, so every test starts from an empty ledger.

Tests run on SQLite by default. Point TEST_DATABASE_URL at a
PostgreSQL database to also run the row-locking tests that
need real concurrent transactions.
"""

import os
from dataclasses import dataclass
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from school_ledger.main import app
from school_ledger.models.base import Base, get_db
from school_ledger.models.enums import AccountType
from school_ledger.schemas.account import AccountCreate
from school_ledger.schemas.currency import CurrencyCreate
from school_ledger.schemas.journal import JournalEntryCreate, JournalLineCreate
from school_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from school_ledger.services.currency_service import CurrencyService


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

if TEST_DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(TEST_DATABASE_URL, pool_pre_ping=True)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Ledger setup ---

@dataclass
class Chart:
    """Ids of the currencies and accounts a school ledger starts with."""
    usd: int
    zwl: int
    cash: int
    bank: int
    tuition: int
    transport: int
    salaries: int
    payroll_payable: int


@pytest.fixture
def chart(db_session) -> Chart:
    """
    Seed two currencies and a small school chart of accounts.

    USD is created first, so it gets id 1 and is the default
    currency for lines that name none.
    """
    currencies = CurrencyService(db_session)
    usd = currencies.create_currency(CurrencyCreate(
        code="USD", name="US Dollar", symbol="$", is_base=True,
    ))
    zwl = currencies.create_currency(CurrencyCreate(
        code="ZWL", name="Zimbabwe Dollar", symbol="Z$",
    ))

    accounts = ChartOfAccountsService(db_session)

    def add(code, name, account_type, parent_id=None):
        return accounts.create_account(AccountCreate(
            code=code, name=name, account_type=account_type, parent_id=parent_id,
        )).id

    assets = add("1000", "Current Assets", AccountType.ASSET)
    seeded = Chart(
        usd=usd.id,
        zwl=zwl.id,
        cash=add("1010", "Cash on Hand", AccountType.ASSET, assets),
        bank=add("1020", "Bank Account", AccountType.ASSET, assets),
        tuition=add("4010", "Tuition Income", AccountType.INCOME),
        transport=add("4020", "Transport Fees", AccountType.INCOME),
        salaries=add("5010", "Salaries Expense", AccountType.EXPENSE),
        payroll_payable=add("2010", "Salaries Payable", AccountType.LIABILITY),
    )
    db_session.commit()
    return seeded


def make_entry(*lines, description="Test entry", reference=None, currency_id=None):
    """
    Build a JournalEntryCreate from (account_id, debit, credit) tuples.

    A fourth tuple element sets the line's currency.
    """
    return JournalEntryCreate(
        description=description,
        reference=reference,
        currency_id=currency_id,
        lines=[
            JournalLineCreate(
                account_id=line[0],
                debit=Decimal(str(line[1])),
                credit=Decimal(str(line[2])),
                currency_id=line[3] if len(line) > 3 else None,
            )
            for line in lines
        ],
    )

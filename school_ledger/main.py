"""
School Ledger FastAPI application.

This is the entry point for the application.
All routers and error handlers are registered here.
"""

from fastapi import FastAPI

from school_ledger.config import get_settings
from school_ledger.exceptions import LedgerError, ledger_exception_handler
from school_ledger.logging_config import setup_logging
from school_ledger.api.health import router as health_router
from school_ledger.api.currencies import router as currencies_router
from school_ledger.api.accounts import router as accounts_router
from school_ledger.api.journal import router as journal_router
from school_ledger.api.balances import router as balances_router

settings = get_settings()

setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="Double-entry ledger and account balance service",
)

app.add_exception_handler(LedgerError, ledger_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(currencies_router)
app.include_router(accounts_router)
app.include_router(journal_router)
app.include_router(balances_router)

"""
Ledger error taxonomy.

Services raise these instead of bare ValueError so the API
layer can map each failure to the right status code without
inspecting message text. ValidationError and NotFoundError
still subclass the matching builtins, so callers that catch
ValueError / LookupError keep working.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class LedgerError(Exception):
    """Base class for every error raised by the ledger services."""

    error_code = "ERR_LEDGER"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(LedgerError, ValueError):
    """
    The request cannot be posted as given.

    Raised before anything is written: unbalanced currency
    groups, negative amounts, empty line lists, inactive
    accounts, duplicate codes.
    """

    error_code = "ERR_VALIDATION"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(LedgerError, LookupError):
    """A referenced account, currency or journal entry does not exist."""

    error_code = "ERR_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id=None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(message)


class StorageError(LedgerError):
    """
    The database failed while writing or reading ledger data.

    Never retried automatically: the caller must roll back and
    re-submit, relying on the entry reference for de-duplication.
    """

    error_code = "ERR_STORAGE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def ledger_exception_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Render a LedgerError as a JSON error body."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
        },
    )

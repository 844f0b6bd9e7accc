"""
Tests for money rounding, the error taxonomy and logging setup.
"""

import logging
from decimal import Decimal

import pytest

from school_ledger.exceptions import NotFoundError, StorageError, ValidationError
from school_ledger.logging_config import setup_logging
from school_ledger.money import ZERO, to_cents


class TestToCents:

    @pytest.mark.parametrize("value, expected", [
        (Decimal("10.005"), Decimal("10.01")),
        (Decimal("10.004"), Decimal("10.00")),
        (Decimal("-2.5"), Decimal("-2.50")),
        (7, Decimal("7.00")),
        ("3.1", Decimal("3.10")),
        (0.1 + 0.2, Decimal("0.30")),
    ])
    def test_rounds_half_up_to_two_places(self, value, expected):
        assert to_cents(value) == expected

    def test_none_is_zero(self):
        assert to_cents(None) == ZERO


class TestErrors:

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            raise ValidationError("bad entry")

    def test_not_found_message(self):
        error = NotFoundError("Account", 12)
        assert isinstance(error, LookupError)
        assert error.message == "Account 12 not found"
        assert error.status_code == 404

    def test_not_found_without_id(self):
        assert NotFoundError("Base currency").message == "Base currency not found"

    def test_storage_error_code(self):
        assert StorageError("disk full").error_code == "ERR_STORAGE"
        assert StorageError("disk full").status_code == 503


class TestSetupLogging:

    def test_single_handler_after_repeated_calls(self):
        setup_logging("DEBUG")
        root = setup_logging("WARNING")

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("CHATTY").level == logging.INFO

"""Tests for the structured logging system (vat_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from vat_engines.cyprus_vat import VATBasis
from vat_kernel.exceptions import InvalidFloorAreaError
from vat_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "vat_kernel.test"
        assert "ts" in record

    def test_decimal_and_enum_extras(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("calc", extra={
            "vat_amount": Decimal("190.00"),
            "vat_basis": VATBasis.STANDARD_19,
        })

        record = _parse_log(stream)
        assert record["vat_amount"] == "190.00"
        assert record["vat_basis"] == "standard19"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise InvalidFloorAreaError(0)
        except InvalidFloorAreaError:
            get_logger("test").exception("calc_failed")

        record = _parse_log(stream)
        assert record["exc_type"] == "InvalidFloorAreaError"
        assert record["exc_code"] == "INVALID_FLOOR_AREA"
        assert record["exc_total_area_sqm"] == "0"
        assert "traceback" in record


class TestLogContext:
    """Tests for context propagation."""

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(invoice_id="inv-1", correlation_id="c-9")
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["invoice_id"] == "inv-1"
        assert record["correlation_id"] == "c-9"

    def test_bind_restores_previous_values(self):
        LogContext.set(invoice_id="inv-1")
        with LogContext.bind(invoice_id="inv-2", correlation_id="c-1"):
            assert LogContext.get_all() == {"correlation_id": "c-1", "invoice_id": "inv-2"}

        assert LogContext.get_all() == {"invoice_id": "inv-1"}

    def test_bind_ignores_unknown_fields(self):
        with LogContext.bind(vendor_id="v-1"):
            assert LogContext.get_all() == {}

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(invoice_id="inv-3"):
                raise RuntimeError("boom")

        assert LogContext.get_all() == {}


class TestConfigureLogging:

    def test_idempotent(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        configure_logging(handler=handler)

        assert len(logging.getLogger("vat_kernel").handlers) == 1

    def test_reset_clears_handlers(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        reset_logging()

        assert logging.getLogger("vat_kernel").handlers == []


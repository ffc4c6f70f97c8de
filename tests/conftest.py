"""
Pytest fixtures for the VAT engine test suite.

Provides:
- Structured logging configured for the session
- LogContext and rules-cache isolation between tests
- ``captured_logs`` for asserting on emitted JSON log records
- The packaged Cyprus rules as a fixture
"""

import json
import logging
from io import StringIO

import pytest

from vat_config import clear_rules_cache, get_active_rules
from vat_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture(autouse=True)
def _fresh_rules(monkeypatch):
    """Each test sees the packaged rules unless it overrides them."""
    monkeypatch.delenv("CYPRUS_VAT_RULES_PATH", raising=False)
    clear_rules_cache()
    yield
    clear_rules_cache()


@pytest.fixture
def captured_logs():
    """
    Capture vat_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_vat("standard19", 100)
            logs = captured_logs()
            assert any(r["message"] == "vat_calculation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("vat_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


@pytest.fixture
def cyprus_rules():
    return get_active_rules()

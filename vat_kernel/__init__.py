"""
VAT Kernel -- ambient infrastructure for the VAT engines.

Provides structured logging, the typed exception hierarchy and Decimal money
helpers. Holds no tax rules of its own.
"""

from vat_kernel.exceptions import (
    InvalidAmountError,
    InvalidFloorAreaError,
    InvalidRulesError,
    VATConfigError,
    VATInputError,
    VATKernelError,
)
from vat_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from vat_kernel.values import (
    MONEY_QUANTUM,
    ROUNDING_TOLERANCE,
    format_money,
    format_rate,
    percent_of,
    round_money,
    to_decimal,
)

__all__ = [
    "InvalidAmountError",
    "InvalidFloorAreaError",
    "InvalidRulesError",
    "LogContext",
    "MONEY_QUANTUM",
    "ROUNDING_TOLERANCE",
    "StructuredFormatter",
    "VATConfigError",
    "VATInputError",
    "VATKernelError",
    "configure_logging",
    "format_money",
    "format_rate",
    "get_logger",
    "percent_of",
    "reset_logging",
    "round_money",
    "to_decimal",
]

"""
Typed exception hierarchy for the VAT kernel.

Business-rule deviations (an old-enough dwelling, a materials share over the
limit, a property over the reduced-rate area) are never exceptions: the
engines fall back to the conservative basis and disclose the reason in the
result's ``warnings``. Exceptions are reserved for contract violations, where
continuing would write a non-finite or meaningless number into a financial
record.

Every class carries a ``code`` attribute (machine-readable, API-safe) and the
offending input as structured attributes, so callers catch by type and log by
field rather than parsing messages.

    VATKernelError (base)
    |
    +-- VATInputError  (also a ValueError)
    |   +-- InvalidAmountError
    |   +-- InvalidFloorAreaError
    |
    +-- VATConfigError
        +-- InvalidRulesError

Category | Code               | When Raised
---------|--------------------|------------------------------------------
Input    | INVALID_AMOUNT     | Amount is not a finite number
         | INVALID_FLOOR_AREA | Primary-residence area is zero or negative
Config   | INVALID_RULES      | Rules file is missing keys or inconsistent
"""

from typing import Any


class VATKernelError(Exception):
    """
    Base exception for all VAT kernel errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "VAT_KERNEL_ERROR"


# Input contract violations


class VATInputError(VATKernelError, ValueError):
    """Base exception for malformed calculator input."""

    code: str = "VAT_INPUT_ERROR"


class InvalidAmountError(VATInputError):
    """A money amount could not be read as a finite decimal number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: Any, field: str = "amount"):
        self.value = repr(value)
        self.field = field
        super().__init__(f"Invalid {field}: {value!r} is not a finite number")


class InvalidFloorAreaError(VATInputError):
    """
    Total floor area must be positive.

    The effective price per square metre is derived by dividing the amount
    by the area, so a zero area has no meaningful split.
    """

    code: str = "INVALID_FLOOR_AREA"

    def __init__(self, total_area_sqm: Any):
        self.total_area_sqm = str(total_area_sqm)
        super().__init__(
            f"Total area must be greater than 0 m², got {total_area_sqm}"
        )


# Configuration errors


class VATConfigError(VATKernelError):
    """Base exception for rule configuration errors."""

    code: str = "VAT_CONFIG_ERROR"


class InvalidRulesError(VATConfigError):
    """The VAT rules document is missing keys or internally inconsistent."""

    code: str = "INVALID_RULES"

    def __init__(self, reason: str, source: str | None = None):
        self.reason = reason
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(f"Invalid VAT rules{where}: {reason}")

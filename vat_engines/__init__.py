"""
Module: vat_engines
Responsibility:
    Package entrypoint re-exporting the public VAT calculation surface.

Architecture position:
    Engines -- pure calculation layer, zero I/O apart from log records.
    Imports vat_kernel and vat_config only.

Invariants enforced:
    - Purity: engines never read the clock; dates are parameters.
    - Decimal-only arithmetic for money; floats are converted at the
      boundary via their string form.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from vat_engines import calculate_vat, format_vat_result, validate_vat_calculation

    result = calculate_vat("reverse_charge", "50000")
    assert validate_vat_calculation(result).valid
    print(format_vat_result(result))
"""

from vat_kernel.logging_config import get_logger

logger = get_logger("engines")

from vat_engines.cyprus_vat import (
    BLENDED_RATE_BASES,
    ENGINE_VERSION,
    PrimaryResidenceVATParams,
    RenovationVATParams,
    VATBasis,
    VATBreakdownLine,
    VATCalculator,
    VATResult,
    apply_reverse_charge,
    calculate_primary_residence_vat,
    calculate_renovation_vat,
    calculate_standard_vat,
    calculate_vat,
    get_vat_calculator,
)
from vat_engines.eligibility import check_basis_eligibility
from vat_engines.formatting import WARNING_GLYPH, format_vat_result
from vat_engines.invoicing import (
    InvoiceVATRecord,
    build_invoice_vat_record,
    invoice_issue_deadline,
    is_invoice_timely,
)
from vat_engines.location import is_cyprus_property
from vat_engines.tracer import compute_input_fingerprint, traced_engine
from vat_engines.validation import ValidationResult, validate_vat_calculation

__all__ = [
    "BLENDED_RATE_BASES",
    "ENGINE_VERSION",
    "InvoiceVATRecord",
    "PrimaryResidenceVATParams",
    "RenovationVATParams",
    "VATBasis",
    "VATBreakdownLine",
    "VATCalculator",
    "VATResult",
    "ValidationResult",
    "WARNING_GLYPH",
    "apply_reverse_charge",
    "build_invoice_vat_record",
    "calculate_primary_residence_vat",
    "calculate_renovation_vat",
    "calculate_standard_vat",
    "calculate_vat",
    "check_basis_eligibility",
    "compute_input_fingerprint",
    "format_vat_result",
    "get_vat_calculator",
    "invoice_issue_deadline",
    "is_cyprus_property",
    "is_invoice_timely",
    "traced_engine",
    "validate_vat_calculation",
]

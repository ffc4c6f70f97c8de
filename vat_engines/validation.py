"""
Post-hoc consistency checks for VAT results.

``validate_vat_calculation`` re-checks a ``VATResult`` independently of the
calculator that produced it, so results loaded back from storage or built
by hand can be checked the same way. It never raises and never stops at the
first problem: every failed check contributes one error string.
"""

from __future__ import annotations

from dataclasses import dataclass

from vat_config import VATRules, get_active_rules
from vat_engines.cyprus_vat import BLENDED_RATE_BASES, VATBasis, VATResult
from vat_kernel.logging_config import get_logger
from vat_kernel.values import ROUNDING_TOLERANCE, format_money, format_rate

logger = get_logger("engines.validation")


@dataclass(frozen=True)
class ValidationResult:
    """Advisory outcome; the caller decides what to do with errors."""

    valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        return cls(valid=not errors, errors=tuple(errors))


def _statutory_rates_message(rules: VATRules) -> str:
    rates = sorted(rules.rates.valid_rates)
    names = [f"{format_rate(r)}%" for r in rates]
    return ", ".join(names[:-1]) + f", or {names[-1]}"


def validate_vat_calculation(
    result: VATResult,
    *,
    rules: VATRules | None = None,
) -> ValidationResult:
    """
    Check a VAT result for internal consistency.

    Checks:
        - rate is a statutory rate, unless the basis reports a blended rate
        - subtotal + VAT equals total within 0.01
        - reverse charge carries zero VAT
        - reverse charge carries the legal note
    """
    rules = rules or get_active_rules()
    errors: list[str] = []

    if (
        result.vat_basis not in BLENDED_RATE_BASES
        and result.vat_rate not in rules.rates.valid_rates
    ):
        errors.append(
            f"Invalid VAT rate: {format_rate(result.vat_rate)}%. "
            f"Must be {_statutory_rates_message(rules)}."
        )

    calculated_total = result.subtotal + result.vat_amount
    if abs(calculated_total - result.total) > ROUNDING_TOLERANCE:
        errors.append(
            f"Total amount mismatch: {result.total} ≠ {format_money(calculated_total)}"
        )

    if result.vat_basis == VATBasis.REVERSE_CHARGE:
        if result.vat_amount != 0:
            errors.append("Reverse charge invoices must have 0 VAT amount.")
        if not result.reverse_charge_note:
            errors.append("Reverse charge invoices must include a legal note.")

    if errors:
        logger.warning("vat_validation_failed", extra={
            "vat_basis": result.vat_basis.value,
            "error_count": len(errors),
            "errors": errors,
        })

    return ValidationResult.from_errors(errors)

"""
Pre-conditions a caller must confirm before choosing a VAT basis.

The calculators trust the basis they are given. These checks cover the
conditions the calculators cannot see from amounts alone: whether the
property is a private residence, and whether a supply qualifies for the
domestic reverse charge. Like the validator, they are advisory.
"""

from __future__ import annotations

from vat_engines.cyprus_vat import VATBasis
from vat_engines.validation import ValidationResult
from vat_kernel.logging_config import get_logger

logger = get_logger("engines.eligibility")


def check_basis_eligibility(
    vat_basis: VATBasis | str,
    *,
    is_private_residence: bool = True,
    is_b2b: bool = False,
    both_vat_registered: bool = False,
) -> ValidationResult:
    """
    Check the caller-confirmed conditions for a basis.

    Renovation needs a private (non-commercial) residence. Reverse charge
    needs a business-to-business supply with both parties VAT-registered.
    Standard and primary residence have no conditions at this layer; an
    unknown basis is reported as an error.
    """
    basis = VATBasis.parse(vat_basis)
    errors: list[str] = []

    if basis is None:
        errors.append(f"Unknown VAT basis: {vat_basis}.")
    elif basis == VATBasis.REDUCED_5_RENOVATION:
        if not is_private_residence:
            errors.append(
                "Reduced renovation rate applies only to private residences, "
                "not commercial property."
            )
    elif basis == VATBasis.REVERSE_CHARGE:
        if not is_b2b:
            errors.append(
                "Reverse charge applies only to business-to-business construction services."
            )
        if not both_vat_registered:
            errors.append(
                "Reverse charge requires both parties to be VAT-registered in Cyprus."
            )

    if errors:
        logger.info("vat_basis_ineligible", extra={
            "vat_basis": str(getattr(vat_basis, "value", vat_basis)),
            "errors": errors,
        })
    return ValidationResult.from_errors(errors)

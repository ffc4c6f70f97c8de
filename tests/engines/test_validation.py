"""
Tests for validate_vat_calculation.

Covers:
- Round-trip: every calculator output validates
- Rate check and the blended-rate exemption
- Total tolerance
- Reverse-charge requirements
- Accumulation of all errors in one pass
"""

from decimal import Decimal

import pytest

from vat_engines.cyprus_vat import (
    PrimaryResidenceVATParams,
    RenovationVATParams,
    VATBasis,
    VATResult,
    apply_reverse_charge,
    calculate_primary_residence_vat,
    calculate_renovation_vat,
    calculate_standard_vat,
)
from vat_engines.validation import ValidationResult, validate_vat_calculation


def _result(**overrides) -> VATResult:
    fields = dict(
        subtotal=Decimal("100.00"),
        vat_rate=Decimal("19"),
        vat_amount=Decimal("19.00"),
        total=Decimal("119.00"),
        vat_basis=VATBasis.STANDARD_19,
    )
    fields.update(overrides)
    return VATResult(**fields)


class TestCalculatorOutputsValidate:
    """Every calculator output is self-consistent."""

    @pytest.mark.parametrize("result_factory", [
        lambda: calculate_standard_vat(Decimal("1234.56")),
        lambda: calculate_renovation_vat(RenovationVATParams(
            amount=Decimal("10000"), dwelling_age_years=5, materials_percentage=30,
        )),
        lambda: calculate_renovation_vat(RenovationVATParams(
            amount=Decimal("10000"), dwelling_age_years=1, materials_percentage=30,
        )),
        lambda: calculate_primary_residence_vat(PrimaryResidenceVATParams(
            amount=Decimal("260000"), total_area_sqm=200,
        )),
        lambda: calculate_primary_residence_vat(PrimaryResidenceVATParams(
            amount=Decimal("99999.99"), total_area_sqm="133.3",
        )),
        lambda: apply_reverse_charge(Decimal("50000")),
    ])
    def test_round_trip(self, result_factory):
        validation = validate_vat_calculation(result_factory())

        assert validation == ValidationResult(valid=True, errors=())

    @pytest.mark.parametrize("result_factory", [
        lambda: calculate_standard_vat(Decimal("100")),
        lambda: calculate_primary_residence_vat(PrimaryResidenceVATParams(
            amount=Decimal("260000"), total_area_sqm=200,
        )),
        lambda: apply_reverse_charge(Decimal("50000")),
    ])
    def test_stored_record_validates(self, result_factory):
        """Results rebuilt from their stored record validate like the original."""
        record = result_factory().to_dict()

        validation = validate_vat_calculation(VATResult.from_dict(record))

        assert validation.valid

    def test_string_fields_validate(self):
        fields = {
            "subtotal": "100.00",
            "vat_rate": "19",
            "vat_amount": "19.00",
            "total": "119.00",
            "vat_basis": "standard19",
        }

        assert validate_vat_calculation(VATResult(**fields)).valid


class TestRateCheck:
    """Tests for the statutory-rate check."""

    def test_non_statutory_rate_rejected(self):
        validation = validate_vat_calculation(_result(
            vat_rate=Decimal("7"), vat_amount=Decimal("7.00"), total=Decimal("107.00"),
        ))

        assert not validation.valid
        assert validation.errors == ("Invalid VAT rate: 7%. Must be 0%, 5%, or 19%.",)

    def test_blended_rate_exempt_for_primary_residence(self):
        validation = validate_vat_calculation(_result(
            vat_rate=Decimal("9.90"),
            vat_amount=Decimal("9.90"),
            total=Decimal("109.90"),
            vat_basis=VATBasis.REDUCED_5_PRIMARY_RESIDENCE,
        ))

        assert validation.valid

    def test_blended_rate_not_exempt_for_other_bases(self):
        """The exemption is tied to the basis, not to the number."""
        validation = validate_vat_calculation(_result(
            vat_rate=Decimal("9.90"),
            vat_amount=Decimal("9.90"),
            total=Decimal("109.90"),
            vat_basis=VATBasis.REDUCED_5_RENOVATION,
        ))

        assert not validation.valid
        assert "Invalid VAT rate: 9.9%" in validation.errors[0]

    def test_trailing_zeros_do_not_matter(self):
        validation = validate_vat_calculation(_result(vat_rate=Decimal("19.00")))

        assert validation.valid


class TestTotalCheck:
    """Tests for subtotal + VAT == total."""

    def test_mismatch_reported(self):
        validation = validate_vat_calculation(_result(total=Decimal("120.00")))

        assert not validation.valid
        assert validation.errors == ("Total amount mismatch: 120.00 ≠ 119.00",)

    def test_one_cent_difference_tolerated(self):
        validation = validate_vat_calculation(_result(total=Decimal("119.01")))

        assert validation.valid

    def test_two_cent_difference_rejected(self):
        validation = validate_vat_calculation(_result(total=Decimal("119.02")))

        assert not validation.valid
        assert "mismatch" in validation.errors[0]


class TestReverseChargeCheck:
    """Tests for the reverse-charge requirements."""

    def test_nonzero_vat_rejected(self):
        validation = validate_vat_calculation(_result(
            vat_rate=Decimal("0"),
            vat_amount=Decimal("5.00"),
            total=Decimal("105.00"),
            vat_basis=VATBasis.REVERSE_CHARGE,
            reverse_charge_note="Reverse charge applies.",
        ))

        assert validation.errors == ("Reverse charge invoices must have 0 VAT amount.",)

    @pytest.mark.parametrize("note", [None, ""])
    def test_missing_note_rejected(self, note):
        validation = validate_vat_calculation(_result(
            vat_rate=Decimal("0"),
            vat_amount=Decimal("0"),
            total=Decimal("100.00"),
            vat_basis=VATBasis.REVERSE_CHARGE,
            reverse_charge_note=note,
        ))

        assert validation.errors == ("Reverse charge invoices must include a legal note.",)


class TestAccumulation:
    """The validator reports every problem, never just the first."""

    def test_all_errors_collected(self):
        validation = validate_vat_calculation(_result(
            vat_rate=Decimal("7"),
            vat_amount=Decimal("5.00"),
            total=Decimal("200.00"),
            vat_basis=VATBasis.REVERSE_CHARGE,
        ))

        assert not validation.valid
        assert len(validation.errors) == 4
        assert validation.errors[0].startswith("Invalid VAT rate")
        assert validation.errors[1].startswith("Total amount mismatch")
        assert validation.errors[2] == "Reverse charge invoices must have 0 VAT amount."
        assert validation.errors[3] == "Reverse charge invoices must include a legal note."

    def test_failures_logged(self, captured_logs):
        validate_vat_calculation(_result(total=Decimal("500.00")))

        failed = [r for r in captured_logs() if r["message"] == "vat_validation_failed"]
        assert failed[0]["error_count"] == 1

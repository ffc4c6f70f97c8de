"""
Cyprus VAT Engine - VAT for construction and renovation invoicing.

Supports four bases:
    - standard19: 19% on the full amount.
    - reduced5_renovation: 5% for renovation of private dwellings at least
      3 years from first occupation, with materials at most 50% of value.
    - reduced5_primary_residence: 5% on the first 130 m² of a primary
      residence, 19% on the remainder.
    - reverse_charge: 0% for B2B construction services, with the mandatory
      legal note; the recipient accounts for the VAT.

Calculations never fail on business input. An ineligible renovation falls
back to the standard rate and says why in ``warnings``. Only contract
violations (non-numeric amounts, zero floor area) raise.

Usage:
    from decimal import Decimal
    from vat_engines.cyprus_vat import RenovationVATParams, calculate_renovation_vat

    result = calculate_renovation_vat(RenovationVATParams(
        amount=Decimal("10000"),
        dwelling_age_years=5,
        materials_percentage=30,
    ))
    print(result.vat_amount)  # Decimal('500.00')
    print(result.vat_basis)   # VATBasis.REDUCED_5_RENOVATION
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from vat_config import VATRules, get_active_rules
from vat_engines.tracer import traced_engine
from vat_kernel.exceptions import InvalidFloorAreaError
from vat_kernel.logging_config import get_logger
from vat_kernel.values import (
    HUNDRED,
    NumberLike,
    format_rate,
    percent_of,
    round_money,
    to_decimal,
)

logger = get_logger("engines.cyprus_vat")

ENGINE_VERSION = "1.0"


class VATBasis(str, Enum):
    """Legal basis for the rate applied. Persisted with the invoice."""

    STANDARD_19 = "standard19"
    REDUCED_5_RENOVATION = "reduced5_renovation"
    REDUCED_5_PRIMARY_RESIDENCE = "reduced5_primary_residence"
    REVERSE_CHARGE = "reverse_charge"

    @classmethod
    def parse(cls, value: VATBasis | str) -> VATBasis | None:
        """Return the member for ``value``, or None if it is not a known tag."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Bases whose reported rate is a weighted average of line rates rather than
# one of the statutory rates.
BLENDED_RATE_BASES: frozenset[VATBasis] = frozenset(
    {VATBasis.REDUCED_5_PRIMARY_RESIDENCE}
)


@dataclass(frozen=True)
class VATBreakdownLine:
    """One rated portion of a mixed-rate supply."""

    description: str
    amount: Decimal
    vat_rate: Decimal
    vat_amount: Decimal

    def __post_init__(self) -> None:
        for name in ("amount", "vat_rate", "vat_amount"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))

    def to_dict(self) -> dict[str, str]:
        return {
            "description": self.description,
            "amount": str(self.amount),
            "vatRate": str(self.vat_rate),
            "vatAmount": str(self.vat_amount),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VATBreakdownLine:
        return cls(
            description=data["description"],
            amount=data["amount"],
            vat_rate=data["vatRate"],
            vat_amount=data["vatAmount"],
        )


@dataclass(frozen=True)
class VATResult:
    """
    Complete VAT calculation.

    Immutable; callers persist the fields verbatim as the invoice's tax
    record. ``vat_basis`` is the audit record of why the rate applies.
    """

    subtotal: Decimal
    vat_rate: Decimal  # Percentage, e.g. 19
    vat_amount: Decimal
    total: Decimal
    vat_basis: VATBasis
    breakdown: tuple[VATBreakdownLine, ...] | None = None
    warnings: tuple[str, ...] = ()
    reverse_charge_note: str | None = None

    def __post_init__(self) -> None:
        # Closed tag: reject anything that is not a known basis
        object.__setattr__(self, "vat_basis", VATBasis(self.vat_basis))
        for name in ("subtotal", "vat_rate", "vat_amount", "total"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))
        if self.breakdown is not None:
            object.__setattr__(self, "breakdown", tuple(self.breakdown))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form with the field names used by invoice records."""
        return {
            "subtotal": str(self.subtotal),
            "vatRate": str(self.vat_rate),
            "vatAmount": str(self.vat_amount),
            "total": str(self.total),
            "vatBasis": self.vat_basis.value,
            "breakdown": (
                [line.to_dict() for line in self.breakdown]
                if self.breakdown is not None
                else None
            ),
            "warnings": list(self.warnings),
            "reverseChargeNote": self.reverse_charge_note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VATResult:
        """
        Rebuild a result from its ``to_dict`` record.

        Raises:
            InvalidAmountError: if a number field does not parse.
            ValueError: if ``vatBasis`` is not a known tag.
        """
        breakdown = data.get("breakdown")
        return cls(
            subtotal=data["subtotal"],
            vat_rate=data["vatRate"],
            vat_amount=data["vatAmount"],
            total=data["total"],
            vat_basis=data["vatBasis"],
            breakdown=(
                tuple(VATBreakdownLine.from_dict(line) for line in breakdown)
                if breakdown is not None
                else None
            ),
            warnings=tuple(data.get("warnings") or ()),
            reverse_charge_note=data.get("reverseChargeNote"),
        )


@dataclass(frozen=True)
class RenovationVATParams:
    """Inputs for the renovation rate. Numbers are normalized to Decimal."""

    amount: Decimal
    dwelling_age_years: Decimal  # Years since first occupation
    materials_percentage: Decimal  # 0-100, share of value that is materials

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(
            self,
            "dwelling_age_years",
            to_decimal(self.dwelling_age_years, "dwelling_age_years"),
        )
        object.__setattr__(
            self,
            "materials_percentage",
            to_decimal(self.materials_percentage, "materials_percentage"),
        )


@dataclass(frozen=True)
class PrimaryResidenceVATParams:
    """
    Inputs for the primary-residence rate.

    ``price_per_sqm`` is optional; when absent (or zero) it is derived as
    ``amount / total_area_sqm``.

    Raises:
        InvalidFloorAreaError: if ``total_area_sqm`` is zero or negative.
    """

    amount: Decimal
    total_area_sqm: Decimal
    price_per_sqm: Decimal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        area = to_decimal(self.total_area_sqm, "total_area_sqm")
        if area <= 0:
            raise InvalidFloorAreaError(self.total_area_sqm)
        object.__setattr__(self, "total_area_sqm", area)
        if self.price_per_sqm is not None:
            object.__setattr__(
                self, "price_per_sqm", to_decimal(self.price_per_sqm, "price_per_sqm")
            )


# ---------------------------------------------------------------------------
# Calculators
# ---------------------------------------------------------------------------


def _single_rate_result(
    subtotal: Decimal,
    rate: Decimal,
    basis: VATBasis,
) -> VATResult:
    raw_vat = percent_of(subtotal, rate)
    return VATResult(
        subtotal=subtotal,
        vat_rate=rate,
        vat_amount=round_money(raw_vat),
        total=round_money(subtotal + raw_vat),
        vat_basis=basis,
    )


@traced_engine("vat_standard", ENGINE_VERSION, fingerprint_fields=("amount",))
def calculate_standard_vat(
    amount: NumberLike,
    *,
    rules: VATRules | None = None,
) -> VATResult:
    """
    Standard 19% VAT on the full amount.

    Always succeeds for numeric input; zero and negative amounts give
    degenerate but consistent results.
    """
    rules = rules or get_active_rules()
    return _single_rate_result(
        to_decimal(amount), rules.rates.standard, VATBasis.STANDARD_19
    )


def _fall_back_to_standard(
    amount: Decimal,
    warning: str,
    rules: VATRules,
    reason: str,
) -> VATResult:
    logger.warning("vat_renovation_fallback", extra={
        "amount": str(amount),
        "reason": reason,
        "fallback_basis": VATBasis.STANDARD_19.value,
    })
    return replace(calculate_standard_vat(amount, rules=rules), warnings=(warning,))


@traced_engine(
    "vat_renovation",
    ENGINE_VERSION,
    fingerprint_fields=("params",),
)
def calculate_renovation_vat(
    params: RenovationVATParams,
    *,
    rules: VATRules | None = None,
) -> VATResult:
    """
    Reduced 5% VAT for renovation of a private dwelling.

    Guards, checked in order:
        1. dwelling at least 3 years from first occupation
        2. materials at most 50% of total value

    The first failing guard returns a standard19 result carrying a single
    warning naming the unmet condition. No partial credit between guards.
    """
    rules = rules or get_active_rules()
    renovation = rules.renovation
    standard = format_rate(rules.rates.standard)

    if params.dwelling_age_years < renovation.min_dwelling_age_years:
        return _fall_back_to_standard(
            params.amount,
            f"Dwelling must be at least {renovation.min_dwelling_age_years} years old "
            f"for reduced rate. Using standard {standard}% rate.",
            rules,
            reason="dwelling_too_new",
        )

    if params.materials_percentage > renovation.max_materials_percentage:
        return _fall_back_to_standard(
            params.amount,
            f"Materials exceed {format_rate(renovation.max_materials_percentage)}% "
            f"of total value. Using standard {standard}% rate.",
            rules,
            reason="materials_share_exceeded",
        )

    return _single_rate_result(
        params.amount, rules.rates.reduced, VATBasis.REDUCED_5_RENOVATION
    )


def _format_area(area: Decimal) -> str:
    return f"{area.quantize(Decimal(1), rounding=ROUND_HALF_UP):f}"


@traced_engine(
    "vat_primary_residence",
    ENGINE_VERSION,
    fingerprint_fields=("params",),
)
def calculate_primary_residence_vat(
    params: PrimaryResidenceVATParams,
    *,
    rules: VATRules | None = None,
) -> VATResult:
    """
    Mixed-rate VAT for construction of a primary residence.

    The first 130 m² are charged at 5% and any remainder at 19%, both at
    the same price per m². The reported ``vat_rate`` is the blended
    effective rate (total VAT / amount), for disclosure only; each
    breakdown line uses a statutory rate.

    Line amounts are rounded to the cent; the top-level VAT and total are
    rounded from the unrounded line values.
    """
    rules = rules or get_active_rules()
    reduced_rate = rules.rates.reduced
    standard_rate = rules.rates.standard
    area_limit = rules.primary_residence.reduced_area_limit_sqm

    amount = params.amount
    area = params.total_area_sqm
    price_per_sqm = params.price_per_sqm or (amount / area)

    reduced_area = min(area, area_limit)
    standard_area = max(Decimal(0), area - area_limit)

    reduced_amount = reduced_area * price_per_sqm
    reduced_vat = percent_of(reduced_amount, reduced_rate)
    breakdown = [
        VATBreakdownLine(
            description=(
                f"First {_format_area(reduced_area)} m² @ {format_rate(reduced_rate)}% VAT"
            ),
            amount=round_money(reduced_amount),
            vat_rate=reduced_rate,
            vat_amount=round_money(reduced_vat),
        )
    ]
    warnings: list[str] = []

    standard_vat = Decimal(0)
    if standard_area > 0:
        standard_amount = standard_area * price_per_sqm
        standard_vat = percent_of(standard_amount, standard_rate)
        breakdown.append(
            VATBreakdownLine(
                description=(
                    f"Remaining {_format_area(standard_area)} m² @ "
                    f"{format_rate(standard_rate)}% VAT"
                ),
                amount=round_money(standard_amount),
                vat_rate=standard_rate,
                vat_amount=round_money(standard_vat),
            )
        )
        warnings.append(
            f"Property exceeds {_format_area(area_limit)} m². "
            f"First {_format_area(area_limit)} m² charged at {format_rate(reduced_rate)}%, "
            f"remaining {_format_area(standard_area)} m² at {format_rate(standard_rate)}%."
        )
        logger.info("vat_primary_residence_split", extra={
            "total_area_sqm": str(area),
            "reduced_area_sqm": str(reduced_area),
            "standard_area_sqm": str(standard_area),
            "price_per_sqm": str(price_per_sqm),
        })

    total_vat = reduced_vat + standard_vat
    if amount == 0:
        effective_rate = Decimal(0)
    else:
        effective_rate = round_money(total_vat / amount * HUNDRED)

    return VATResult(
        subtotal=amount,
        vat_rate=effective_rate,
        vat_amount=round_money(total_vat),
        total=round_money(amount + total_vat),
        vat_basis=VATBasis.REDUCED_5_PRIMARY_RESIDENCE,
        breakdown=tuple(breakdown),
        warnings=tuple(warnings),
    )


@traced_engine("vat_reverse_charge", ENGINE_VERSION, fingerprint_fields=("amount",))
def apply_reverse_charge(
    amount: NumberLike,
    *,
    rules: VATRules | None = None,
) -> VATResult:
    """
    Domestic reverse charge for B2B construction services.

    The invoice shows 0% VAT with the statutory note; the recipient
    accounts for the VAT. Applicability is the caller's decision and is
    not re-checked here.
    """
    rules = rules or get_active_rules()
    subtotal = to_decimal(amount)
    return VATResult(
        subtotal=subtotal,
        vat_rate=rules.rates.zero,
        vat_amount=Decimal("0"),
        total=subtotal,
        vat_basis=VATBasis.REVERSE_CHARGE,
        warnings=(rules.reverse_charge.reminder,),
        reverse_charge_note=rules.reverse_charge.legal_note,
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

VATCalculator = Callable[..., VATResult]


def _standard_entry(amount: NumberLike, params: Any = None) -> VATResult:
    return calculate_standard_vat(amount)


def _renovation_entry(
    amount: NumberLike,
    params: RenovationVATParams | None = None,
) -> VATResult:
    if params is None:
        # Without details the supply is treated as just eligible.
        rules = get_active_rules()
        params = RenovationVATParams(
            amount=amount,
            dwelling_age_years=rules.renovation.min_dwelling_age_years,
            materials_percentage=0,
        )
    return calculate_renovation_vat(params)


def _primary_residence_entry(
    amount: NumberLike,
    params: PrimaryResidenceVATParams | None = None,
) -> VATResult:
    if params is None:
        params = PrimaryResidenceVATParams(
            amount=amount,
            total_area_sqm=get_active_rules().primary_residence.reduced_area_limit_sqm,
        )
    return calculate_primary_residence_vat(params)


def _reverse_charge_entry(amount: NumberLike, params: Any = None) -> VATResult:
    return apply_reverse_charge(amount)


_CALCULATORS: dict[VATBasis, VATCalculator] = {
    VATBasis.STANDARD_19: _standard_entry,
    VATBasis.REDUCED_5_RENOVATION: _renovation_entry,
    VATBasis.REDUCED_5_PRIMARY_RESIDENCE: _primary_residence_entry,
    VATBasis.REVERSE_CHARGE: _reverse_charge_entry,
}


def get_vat_calculator(vat_basis: VATBasis | str) -> VATCalculator:
    """
    Return the calculator for a basis, as ``f(amount, params=None)``.

    When ``params`` is given it is used as-is (including its amount).
    Unknown tags fall back to the standard calculator.
    """
    basis = VATBasis.parse(vat_basis)
    if basis is None:
        logger.warning("vat_basis_unknown", extra={
            "vat_basis": str(vat_basis),
            "fallback_basis": VATBasis.STANDARD_19.value,
        })
        return _standard_entry
    return _CALCULATORS[basis]


def calculate_vat(
    vat_basis: VATBasis | str,
    amount: NumberLike,
    params: RenovationVATParams | PrimaryResidenceVATParams | None = None,
) -> VATResult:
    """Dispatch on ``vat_basis`` and calculate in one call."""
    result = get_vat_calculator(vat_basis)(amount, params)
    logger.info("vat_calculation_completed", extra={
        "requested_basis": str(getattr(vat_basis, "value", vat_basis)),
        "vat_basis": result.vat_basis.value,
        "subtotal": str(result.subtotal),
        "vat_rate": str(result.vat_rate),
        "vat_amount": str(result.vat_amount),
        "total": str(result.total),
        "warning_count": len(result.warnings),
    })
    return result

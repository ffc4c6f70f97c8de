"""
VAT rules schema.

The human-authored rules file (``rules/cyprus.yaml``) is parsed by the loader
into these frozen dataclasses. Engines read only these types, never raw YAML.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RateTable:
    """The legally valid VAT rates, as percentages."""

    standard: Decimal
    reduced: Decimal
    zero: Decimal

    @property
    def valid_rates(self) -> frozenset[Decimal]:
        return frozenset({self.standard, self.reduced, self.zero})


@dataclass(frozen=True)
class RenovationRules:
    """Eligibility thresholds for the reduced renovation rate."""

    min_dwelling_age_years: int
    max_materials_percentage: Decimal


@dataclass(frozen=True)
class PrimaryResidenceRules:
    """Area split for the primary-residence reduced rate."""

    reduced_area_limit_sqm: Decimal


@dataclass(frozen=True)
class ReverseChargeRules:
    legal_note: str
    reminder: str


@dataclass(frozen=True)
class VATRules:
    """
    Complete rule set for one jurisdiction.

    ``checksum`` is the SHA-256 of the source document, recorded so that an
    auditor can tie a calculation back to the exact rules it used.
    """

    jurisdiction: str
    currency: str
    currency_symbol: str
    rates: RateTable
    renovation: RenovationRules
    primary_residence: PrimaryResidenceRules
    reverse_charge: ReverseChargeRules
    issue_window_days: int
    location_keywords: tuple[str, ...]
    checksum: str = ""

"""
Invoice-side helpers: the persisted VAT record and the issue deadline.

``build_invoice_vat_record`` projects a ``VATResult`` and the inputs that
produced it onto the invoice columns. Basis-specific inputs are kept only
for their own basis, so a renovation that fell back to the standard rate
records no dwelling age.

Dates are always passed in; nothing here reads the clock.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from vat_config import get_active_rules
from vat_engines.cyprus_vat import (
    PrimaryResidenceVATParams,
    RenovationVATParams,
    VATBasis,
    VATResult,
)


@dataclass(frozen=True)
class InvoiceVATRecord:
    """
    The VAT columns of an invoice row.

    ``property_location`` doubles as the place of supply: for work on
    immovable property the supply takes place where the property is.
    """

    vat_basis: str
    vat_rate: Decimal
    vat_amount: Decimal
    subtotal: Decimal
    total: Decimal
    reverse_charge_note: str | None
    warnings: tuple[str, ...]
    dwelling_age_years: Decimal | None = None
    materials_percentage: Decimal | None = None
    property_area_sqm: Decimal | None = None
    property_location: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["warnings"] = list(self.warnings)
        return data


def build_invoice_vat_record(
    result: VATResult,
    *,
    renovation: RenovationVATParams | None = None,
    primary_residence: PrimaryResidenceVATParams | None = None,
    property_location: str | None = None,
) -> InvoiceVATRecord:
    """Build the invoice VAT record for a calculation."""
    basis = result.vat_basis
    keep_renovation = renovation is not None and basis == VATBasis.REDUCED_5_RENOVATION
    keep_residence = (
        primary_residence is not None and basis == VATBasis.REDUCED_5_PRIMARY_RESIDENCE
    )
    return InvoiceVATRecord(
        vat_basis=basis.value,
        vat_rate=result.vat_rate,
        vat_amount=result.vat_amount,
        subtotal=result.subtotal,
        total=result.total,
        reverse_charge_note=result.reverse_charge_note,
        warnings=result.warnings,
        dwelling_age_years=renovation.dwelling_age_years if keep_renovation else None,
        materials_percentage=renovation.materials_percentage if keep_renovation else None,
        property_area_sqm=primary_residence.total_area_sqm if keep_residence else None,
        property_location=property_location,
    )


def invoice_issue_deadline(tax_point: date) -> date:
    """Last day an invoice may be issued for a supply with this tax point."""
    return tax_point + timedelta(days=get_active_rules().issue_window_days)


def is_invoice_timely(tax_point: date, issue_date: date) -> bool:
    """True if ``issue_date`` falls within the issue window of ``tax_point``."""
    return issue_date <= invoice_issue_deadline(tax_point)

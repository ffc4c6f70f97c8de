"""Plain-text rendering of VAT results for display and printing."""

from __future__ import annotations

from vat_config import get_active_rules
from vat_engines.cyprus_vat import VATResult
from vat_kernel.values import format_money, format_rate

WARNING_GLYPH = "⚠️"


def format_vat_result(result: VATResult, currency_symbol: str | None = None) -> str:
    """
    Render a result as a fixed-order multi-line report.

    Order: subtotal, rate, VAT, total, basis; then breakdown lines, the
    legal note and warnings, each section only when present. Every line
    ends with a newline.
    """
    symbol = get_active_rules().currency_symbol if currency_symbol is None else currency_symbol

    lines = [
        f"Subtotal: {symbol}{format_money(result.subtotal)}",
        f"VAT ({format_rate(result.vat_rate)}%): {symbol}{format_money(result.vat_amount)}",
        f"Total: {symbol}{format_money(result.total)}",
        f"Basis: {result.vat_basis.value}",
    ]

    if result.breakdown:
        lines += ["", "Breakdown:"]
        for item in result.breakdown:
            lines.append(
                f"  {item.description}: {symbol}{format_money(item.amount)}"
                f" + {symbol}{format_money(item.vat_amount)} VAT"
            )

    if result.reverse_charge_note:
        lines += ["", f"Note: {result.reverse_charge_note}"]

    if result.warnings:
        lines += ["", "Warnings:"]
        lines += [f"  {WARNING_GLYPH} {warning}" for warning in result.warnings]

    return "\n".join(lines) + "\n"

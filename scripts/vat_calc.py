#!/usr/bin/env python3
"""
Calculate Cyprus VAT for one invoice amount and print the report.

Usage:
    python3 scripts/vat_calc.py BASIS AMOUNT [options]

Examples:
    # Standard 19%
    python3 scripts/vat_calc.py standard19 1000

    # Renovation of a 5-year-old dwelling, 30% materials
    python3 scripts/vat_calc.py reduced5_renovation 10000 --dwelling-age 5 --materials-pct 30

    # Primary residence, 200 m²
    python3 scripts/vat_calc.py reduced5_primary_residence 260000 --area 200

    # Reverse charge, JSON output
    python3 scripts/vat_calc.py reverse_charge 50000 --json

    # Tag the log records with the invoice being priced
    python3 scripts/vat_calc.py standard19 1000 --invoice-id INV-2024-001 --log-level INFO

Exit codes: 0 = result validates, 1 = validation errors, 2 = invalid input.
"""

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from vat_config import VATRules, get_active_rules  # noqa: E402
from vat_engines import (  # noqa: E402
    PrimaryResidenceVATParams,
    RenovationVATParams,
    VATBasis,
    calculate_vat,
    format_vat_result,
    validate_vat_calculation,
)
from vat_kernel.exceptions import VATInputError  # noqa: E402
from vat_kernel.logging_config import LogContext, configure_logging  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cyprus VAT calculator for construction and renovation invoices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "basis",
        choices=[b.value for b in VATBasis],
        help="VAT basis to apply",
    )
    parser.add_argument("amount", help="Invoice amount excluding VAT")
    parser.add_argument(
        "--dwelling-age",
        help="Years since first occupation (renovation)",
    )
    parser.add_argument(
        "--materials-pct",
        help="Materials share of total value, 0-100 (renovation)",
    )
    parser.add_argument("--area", help="Total floor area in m² (primary residence)")
    parser.add_argument(
        "--price-per-sqm",
        help="Price per m² (primary residence, needs --area; derived from amount if omitted)",
    )
    parser.add_argument(
        "--invoice-id",
        help="Invoice the amount belongs to; stamped on every log record",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Structured log level on stderr (default: WARNING)",
    )
    return parser


def _build_params(args: argparse.Namespace, rules: VATRules):
    if args.basis == VATBasis.REDUCED_5_RENOVATION.value and (
        args.dwelling_age is not None or args.materials_pct is not None
    ):
        return RenovationVATParams(
            amount=args.amount,
            dwelling_age_years=(
                args.dwelling_age
                if args.dwelling_age is not None
                else rules.renovation.min_dwelling_age_years
            ),
            materials_percentage=args.materials_pct if args.materials_pct is not None else 0,
        )
    if args.basis == VATBasis.REDUCED_5_PRIMARY_RESIDENCE.value and args.area is not None:
        return PrimaryResidenceVATParams(
            amount=args.amount,
            total_area_sqm=args.area,
            price_per_sqm=args.price_per_sqm,
        )
    return None


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.price_per_sqm is not None and args.area is None:
        parser.error("--price-per-sqm requires --area")
    configure_logging(level=getattr(logging, args.log_level))

    with LogContext.bind(invoice_id=args.invoice_id, correlation_id=uuid.uuid4().hex):
        return _run(args)


def _run(args: argparse.Namespace) -> int:
    try:
        result = calculate_vat(args.basis, args.amount, _build_params(args, get_active_rules()))
    except VATInputError as exc:
        print(f"Error [{exc.code}]: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_vat_result(result), end="")

    validation = validate_vat_calculation(result)
    if not validation.valid:
        for error in validation.errors:
            print(f"Validation error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

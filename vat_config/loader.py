"""
Rules Loader (``vat_config.loader``).

Responsibility
--------------
Loads a VAT rules YAML document and parses it into the typed, frozen
``vat_config.schema.VATRules``. Runtime code should call
``vat_config.get_active_rules()`` rather than this module directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys or inconsistent values  -> ``InvalidRulesError``.

Audit relevance
---------------
``compute_checksum`` gives a deterministic SHA-256 of the parsed document,
stored on ``VATRules.checksum``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from vat_config.schema import (
    PrimaryResidenceRules,
    RateTable,
    RenovationRules,
    ReverseChargeRules,
    VATRules,
)
from vat_kernel.exceptions import InvalidRulesError
from vat_kernel.logging_config import get_logger

logger = get_logger("config.loader")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _require(data: dict[str, Any], key: str, source: str | None) -> Any:
    if key not in data or data[key] is None:
        raise InvalidRulesError(f"missing required key '{key}'", source)
    return data[key]


def _parse_decimal(value: Any, key: str, source: str | None) -> Decimal:
    if isinstance(value, bool):
        raise InvalidRulesError(f"'{key}' must be a number, got {value!r}", source)
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidRulesError(f"'{key}' must be a number, got {value!r}", source) from exc
    if not result.is_finite() or result < 0:
        raise InvalidRulesError(f"'{key}' must be a non-negative number, got {value!r}", source)
    return result


def parse_rules(data: dict[str, Any], source: str | None = None) -> VATRules:
    """
    Parse a ``VATRules`` from a dict.

    Raises:
        InvalidRulesError: if a required key is missing, a number is
            invalid, or the rates are not ordered zero < reduced < standard.
    """
    rates_data = _require(data, "rates", source)
    rates = RateTable(
        standard=_parse_decimal(_require(rates_data, "standard", source), "rates.standard", source),
        reduced=_parse_decimal(_require(rates_data, "reduced", source), "rates.reduced", source),
        zero=_parse_decimal(rates_data.get("zero", 0), "rates.zero", source),
    )
    if not rates.zero < rates.reduced < rates.standard:
        raise InvalidRulesError(
            f"rates must satisfy zero < reduced < standard, got "
            f"{rates.zero} / {rates.reduced} / {rates.standard}",
            source,
        )

    renovation_data = _require(data, "renovation", source)
    renovation = RenovationRules(
        min_dwelling_age_years=int(
            _parse_decimal(
                _require(renovation_data, "min_dwelling_age_years", source),
                "renovation.min_dwelling_age_years",
                source,
            )
        ),
        max_materials_percentage=_parse_decimal(
            _require(renovation_data, "max_materials_percentage", source),
            "renovation.max_materials_percentage",
            source,
        ),
    )

    residence_data = _require(data, "primary_residence", source)
    residence = PrimaryResidenceRules(
        reduced_area_limit_sqm=_parse_decimal(
            _require(residence_data, "reduced_area_limit_sqm", source),
            "primary_residence.reduced_area_limit_sqm",
            source,
        ),
    )

    reverse_data = _require(data, "reverse_charge", source)
    legal_note = str(_require(reverse_data, "legal_note", source)).strip()
    if not legal_note:
        raise InvalidRulesError("reverse_charge.legal_note must not be empty", source)
    reverse_charge = ReverseChargeRules(
        legal_note=legal_note,
        reminder=str(_require(reverse_data, "reminder", source)).strip(),
    )

    invoicing = data.get("invoicing") or {}
    keywords = tuple(
        str(k).strip().lower() for k in data.get("location_keywords") or () if str(k).strip()
    )

    return VATRules(
        jurisdiction=str(_require(data, "jurisdiction", source)),
        currency=str(_require(data, "currency", source)),
        currency_symbol=str(data.get("currency_symbol", "")),
        rates=rates,
        renovation=renovation,
        primary_residence=residence,
        reverse_charge=reverse_charge,
        issue_window_days=int(
            _parse_decimal(invoicing.get("issue_window_days", 30), "invoicing.issue_window_days", source)
        ),
        location_keywords=keywords,
        checksum=compute_checksum(data),
    )


def load_rules(path: Path) -> VATRules:
    """Load and parse a rules file."""
    data = load_yaml_file(path)
    rules = parse_rules(data, source=str(path))
    logger.info("vat_rules_loaded", extra={
        "path": str(path),
        "jurisdiction": rules.jurisdiction,
        "checksum": rules.checksum,
    })
    return rules

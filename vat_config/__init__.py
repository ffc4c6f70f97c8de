"""
VAT rule configuration.

Public API:
    get_active_rules()  -> VATRules   (cached; packaged Cyprus rules by default)
    clear_rules_cache()               (tests only)

Set ``CYPRUS_VAT_RULES_PATH`` to load a different rules file.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from vat_config.loader import compute_checksum, load_rules, load_yaml_file, parse_rules
from vat_config.schema import (
    PrimaryResidenceRules,
    RateTable,
    RenovationRules,
    ReverseChargeRules,
    VATRules,
)

RULES_PATH_ENV = "CYPRUS_VAT_RULES_PATH"
DEFAULT_RULES_PATH = Path(__file__).parent / "rules" / "cyprus.yaml"


def resolve_rules_path() -> Path:
    override = os.environ.get(RULES_PATH_ENV)
    return Path(override) if override else DEFAULT_RULES_PATH


@lru_cache(maxsize=1)
def get_active_rules() -> VATRules:
    """Return the rules in effect for this process."""
    return load_rules(resolve_rules_path())


def clear_rules_cache() -> None:
    get_active_rules.cache_clear()


__all__ = [
    "DEFAULT_RULES_PATH",
    "PrimaryResidenceRules",
    "RULES_PATH_ENV",
    "RateTable",
    "RenovationRules",
    "ReverseChargeRules",
    "VATRules",
    "clear_rules_cache",
    "compute_checksum",
    "get_active_rules",
    "load_rules",
    "load_yaml_file",
    "parse_rules",
    "resolve_rules_path",
]

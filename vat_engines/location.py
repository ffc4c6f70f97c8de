"""Place-of-supply check: is a project location in Cyprus?"""

from __future__ import annotations

from vat_config import get_active_rules


def is_cyprus_property(location: str | None) -> bool:
    """
    Case-insensitive keyword match of a free-text location.

    For services connected with immovable property the place of supply is
    where the property is, so this decides whether Cyprus VAT rules apply.
    A ``False`` answer means "unclear", not "abroad".
    """
    if not location:
        return False
    normalized = location.casefold()
    return any(
        keyword.casefold() in normalized
        for keyword in get_active_rules().location_keywords
    )

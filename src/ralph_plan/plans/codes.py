"""
Effort and risk code tables.

Effort codes: XS, S, M, L, XL. Risk codes: L, M, H.
"""

from __future__ import annotations

EFFORT_CODES = ("XS", "S", "M", "L", "XL")
RISK_CODES = ("L", "M", "H")

EFFORT_MAPPINGS: dict[str, str] = {
    "xs": "XS",
    "extra small": "XS",
    "extra-small": "XS",
    "tiny": "XS",
    "s": "S",
    "small": "S",
    "m": "M",
    "medium": "M",
    "l": "L",
    "large": "L",
    "xl": "XL",
    "extra large": "XL",
    "extra-large": "XL",
    "huge": "XL",
}

RISK_MAPPINGS: dict[str, str] = {
    "l": "L",
    "low": "L",
    "m": "M",
    "medium": "M",
    "med": "M",
    "h": "H",
    "high": "H",
}


def normalize_effort(effort: str) -> str | None:
    """Map an effort word (``"small"``, ``"xl"``...) to its code, or None if unknown."""
    return EFFORT_MAPPINGS.get(effort.strip().lower())


def normalize_risk(risk: str) -> str | None:
    """Map a risk word (``"low"``, ``"h"``...) to its code, or None if unknown."""
    return RISK_MAPPINGS.get(risk.strip().lower())


def effort_code(value: str) -> str:
    """Normalize an effort tag value, passing unknown values through uppercased."""
    return normalize_effort(value) or value.strip().upper()


def risk_code(value: str) -> str:
    """Normalize a risk tag value, passing unknown values through uppercased."""
    return normalize_risk(value) or value.strip().upper()

"""
Inline metadata tags.

Pulls ``[effort: M]``, ``(risk: high)``, ``{id: 1.2}`` and
``[category: ui]`` tags out of a line of text. A leading ``[tag]`` with no
colon is read as a category.
"""

from __future__ import annotations

import re

from ralph_plan.plans.codes import effort_code, risk_code
from ralph_plan.plans.models import InlineMetadata

_TAG = r"[\[({]\s*(effort|risk|id|category)\s*:\s*([^\])}]+?)\s*[\])}]"

INLINE_METADATA_PATTERN = re.compile(_TAG, re.IGNORECASE)

# Removal also eats the whitespace before a tag so no double spaces are left
_TAG_REMOVAL_PATTERN = re.compile(r"\s*" + _TAG, re.IGNORECASE)

# [tag] rest-of-text
CATEGORY_TAG_PATTERN = re.compile(r"^\[([^\]]+)\]\s+(.+)$", re.DOTALL)


def strip_inline_metadata(text: str) -> str:
    """Remove every inline metadata tag from ``text`` and trim the result."""
    return _TAG_REMOVAL_PATTERN.sub("", text).strip()


def split_category_tag(text: str) -> tuple[str | None, str]:
    """
    Split a leading ``[tag]`` off ``text``.

    Returns:
        (category, remaining_text); category is None when the text does not
        start with a bracketed tag or the tag contains a colon.
    """
    match = CATEGORY_TAG_PATTERN.match(text)
    if match is None or ":" in match.group(1):
        return None, text
    return match.group(1), match.group(2).strip()


def parse_inline_metadata(text: str, sniff_category: bool = True) -> InlineMetadata:
    """
    Extract inline metadata tags from a line of text.

    The last occurrence of each key wins. Effort and risk values are
    normalized to their codes, falling back to the uppercased raw value.

    Args:
        text: Line of text, usually a task description
        sniff_category: Read a leading ``[tag]`` as the category when no
            ``category:`` tag is present

    Returns:
        InlineMetadata with the tags found and ``clean_text`` without them
    """
    fields: dict[str, str] = {}
    for match in INLINE_METADATA_PATTERN.finditer(text):
        key = match.group(1).lower()
        value = match.group(2).strip()
        if key == "effort":
            value = effort_code(value)
        elif key == "risk":
            value = risk_code(value)
        fields[key] = value

    result = InlineMetadata(
        clean_text=strip_inline_metadata(text),
        id=fields.get("id"),
        category=fields.get("category"),
        effort=fields.get("effort"),
        risk=fields.get("risk"),
    )

    if sniff_category and result.category is None:
        category, remainder = split_category_tag(result.clean_text)
        if category is not None:
            result.category = category
            result.clean_text = remainder

    return result

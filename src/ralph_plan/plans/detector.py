"""
Structured-format detection.

A plan is "structured" when it uses any of the richer conventions. The
checks run in this order and the first hit wins:

1. has_plan_frontmatter: frontmatter with a ``title``, ``summary`` or ``generator`` key
2. has_metadata_section_header: a Metadata, Overview, Assumptions or Risks header
3. has_inline_metadata_tags: ``[effort: ...]``, ``(risk: ...)``, ``{id: ...}`` tags
4. has_bold_task_titles: a checklist item starting with ``**Title**``
"""

from __future__ import annotations

import re
from collections.abc import Callable

from ralph_plan.plans.frontmatter import find_frontmatter_bounds
from ralph_plan.plans.lines import CHECKBOX_MARK, LIST_MARKER, split_lines

PLAN_FRONTMATTER_KEY_PATTERN = re.compile(r"^\s*(title|summary|generator)\s*:", re.IGNORECASE)

METADATA_SECTION_HEADER_PATTERN = re.compile(
    r"^##?\s+(metadata|overview|assumptions|risks)\s*$", re.IGNORECASE | re.MULTILINE
)

INLINE_TAG_PATTERN = re.compile(r"[\[({]\s*(effort|risk|id)\s*:", re.IGNORECASE)

BOLD_TASK_TITLE_PATTERN = re.compile(
    rf"^\s*{LIST_MARKER}\s+\[{CHECKBOX_MARK}\]\s+\*\*[^*]+\*\*", re.MULTILINE
)


def has_plan_frontmatter(content: str) -> bool:
    lines = split_lines(content)
    bounds = find_frontmatter_bounds(lines)
    if bounds is None:
        return False
    start, end = bounds
    return any(PLAN_FRONTMATTER_KEY_PATTERN.match(line) for line in lines[start + 1 : end])


def has_metadata_section_header(content: str) -> bool:
    return METADATA_SECTION_HEADER_PATTERN.search(content.replace("\r\n", "\n")) is not None


def has_inline_metadata_tags(content: str) -> bool:
    return INLINE_TAG_PATTERN.search(content) is not None


def has_bold_task_titles(content: str) -> bool:
    return BOLD_TASK_TITLE_PATTERN.search(content.replace("\r\n", "\n")) is not None


STRUCTURED_FORMAT_CHECKS: tuple[Callable[[str], bool], ...] = (
    has_plan_frontmatter,
    has_metadata_section_header,
    has_inline_metadata_tags,
    has_bold_task_titles,
)


def is_structured_format(content: str) -> bool:
    """Whether the document uses frontmatter, metadata sections or inline task tags."""
    return any(check(content) for check in STRUCTURED_FORMAT_CHECKS)

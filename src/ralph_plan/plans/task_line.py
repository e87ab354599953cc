"""
Checklist line parsing.

Supports:
- ``- [ ] Task description``
- ``- [x] **Title** - Description`` / ``- [x] **Title**: Description``
- ``- [ ] 1.1.1: Title - Description``
- ``- [ ] [category] Task description``
- ``- [ ] Task [effort: M] [risk: H]``

The heuristics run in a fixed order: inline tags, id prefix, category tag,
then title splitting (bold title before short title).
"""

from __future__ import annotations

import re

from ralph_plan.plans.inline import parse_inline_metadata, split_category_tag
from ralph_plan.plans.lines import CHECKLIST_PATTERN
from ralph_plan.plans.models import ParsedTaskLine

# "1.1.1: rest" or "ID-123: rest"; the prefix must also contain a digit
ID_PREFIX_PATTERN = re.compile(r"^([a-zA-Z0-9.-]+):\s*(.+)$", re.DOTALL)

# **Title** - description  /  **Title**: description
BOLD_TITLE_PATTERN = re.compile(r"^\*\*([^*]+)\*\*\s*[-:]\s*(.+)$", re.DOTALL)

# Short lead (5-50 chars, no dashes), " - ", then at least 10 chars
SHORT_TITLE_PATTERN = re.compile(r"^([^-]{5,50})\s+-\s+(.{10,})$", re.DOTALL)


def split_id_prefix(text: str) -> tuple[str | None, str]:
    """
    Split an id prefix such as ``1.2.3:`` off the text.

    Prose like ``No: backend`` is left alone because the prefix has no digit.
    """
    match = ID_PREFIX_PATTERN.match(text)
    if match is None or not any(ch.isdigit() for ch in match.group(1)):
        return None, text
    return match.group(1), match.group(2).strip()


def split_bold_title(text: str) -> tuple[str, str] | None:
    match = BOLD_TITLE_PATTERN.match(text)
    if match is None:
        return None
    return match.group(1).strip(), match.group(2).strip()


def split_short_title(text: str) -> tuple[str, str] | None:
    match = SHORT_TITLE_PATTERN.match(text)
    if match is None:
        return None
    return match.group(1).strip(), match.group(2).strip()


def split_title(text: str) -> tuple[str | None, str]:
    """Return (title, description); title is None when no heuristic applies."""
    for splitter in (split_bold_title, split_short_title):
        parts = splitter(text)
        if parts is not None and parts[1]:
            return parts
    return None, text


def parse_task_line(line: str) -> ParsedTaskLine | None:
    """
    Parse a single checklist line.

    Args:
        line: Raw line, possibly indented

    Returns:
        ParsedTaskLine, or None when the line is not a checklist item
    """
    match = CHECKLIST_PATTERN.match(line.rstrip())
    if match is None:
        return None

    done = match.group(2).lower() == "x"
    inline = parse_inline_metadata(match.group(3).strip())
    text = inline.clean_text

    task_id = inline.id
    if task_id is None:
        task_id, text = split_id_prefix(text)

    category = inline.category
    if category is None:
        category, text = split_category_tag(text)

    title, description = split_title(text)

    return ParsedTaskLine(
        done=done,
        description=description,
        id=task_id,
        title=title,
        category=category,
        effort=inline.effort,
        risk=inline.risk,
    )

"""
Acceptance criteria collection.

Criteria are the plain list items indented under a task line. A nested
checklist item is never a criterion: it ends collection and is left for the
plan parser to read as its own task.
"""

from __future__ import annotations

import re

from ralph_plan.plans.lines import (
    LineCursor,
    collect_continuation,
    indent_of,
    is_blank,
    is_checklist_item,
    is_fence,
    is_header,
    is_list_item,
    join_text,
    strip_list_marker,
)
from ralph_plan.plans.models import CriteriaResult

ACCEPTANCE_LABEL_PATTERN = re.compile(r"^\**acceptance\s*criteria\**\s*:?\**\s*$", re.IGNORECASE)


def collect_criteria(cursor: LineCursor, task_indent: int) -> tuple[list[str], LineCursor]:
    """
    Collect acceptance criteria starting at ``cursor``.

    Args:
        cursor: Cursor on the first line after the task (and its continuation)
        task_indent: Indentation of the task line

    Returns:
        Tuple of (criteria, cursor on the first unconsumed line)
    """
    criteria: list[str] = []

    while not cursor.at_end:
        line = cursor.current

        if is_blank(line):
            cursor = cursor.advance()
            continue

        if is_fence(line) or is_header(line) or is_checklist_item(line):
            break

        indent = indent_of(line)
        if indent <= task_indent:
            break

        if ACCEPTANCE_LABEL_PATTERN.match(line.strip()):
            cursor = cursor.advance()
            continue

        if is_list_item(line):
            continuation, cursor = collect_continuation(
                cursor.advance(), indent, allow_list_items=True
            )
            criteria.append(join_text(strip_list_marker(line), continuation))
            continue

        # Deeper prose that belongs to no criterion
        cursor = cursor.advance()

    return criteria, cursor


def parse_acceptance_criteria(
    lines: list[str], start_index: int, task_indent: int
) -> CriteriaResult:
    """
    Index-based form of :func:`collect_criteria`.

    Args:
        lines: Document lines
        start_index: Index of the line after the task
        task_indent: Indentation of the task line

    Returns:
        CriteriaResult with the criteria and the first unconsumed index
    """
    criteria, cursor = collect_criteria(LineCursor.from_lines(lines, start_index), task_indent)
    return CriteriaResult(criteria=criteria, end_index=cursor.position)

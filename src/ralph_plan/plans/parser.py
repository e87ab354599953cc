"""
Markdown plan parser.

Turns a markdown plan into PRD items in one pass over the document:

1. Frontmatter is split off and turned into metadata.
2. Metadata sections (``## Overview``, ``## Assumptions``, ``## Risks``) are
   read from the body and override frontmatter fields of the same name.
3. Each checklist line becomes a TaskItem. Deeper-indented prose right after
   it continues the description; indented plain list items after that become
   acceptance criteria.

Headers that are not reserved section names set the category inherited by
the tasks below them. Fenced code blocks are skipped entirely.

Example:
    result = parse_markdown_plan(markdown_text, source_file="plan.md")
    for item in result.items:
        status = "done" if item.passes else "todo"
        print(f"[{status}] {item.category}: {item.description}")
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from ralph_plan.plans.criteria import collect_criteria
from ralph_plan.plans.detector import is_structured_format
from ralph_plan.plans.frontmatter import parse_frontmatter
from ralph_plan.plans.inline import parse_inline_metadata, strip_inline_metadata
from ralph_plan.plans.lines import (
    LineCursor,
    collect_continuation,
    indent_of,
    is_fence,
    join_text,
)
from ralph_plan.plans.models import (
    DEFAULT_CATEGORY,
    DEFAULT_GENERATOR,
    ParsedPlan,
    ParsedTaskLine,
    PlanMetadata,
    SectionMetadata,
    TaskItem,
)
from ralph_plan.plans.sections import parse_metadata_sections, parse_risk_line
from ralph_plan.plans.task_line import parse_task_line

logger = logging.getLogger(__name__)

# "#", "##" or "###" headers name the category of the tasks below them
CATEGORY_HEADER_PATTERN = re.compile(r"^#{1,3}\s+(.+)$")

RESERVED_HEADERS = frozenset(
    {"metadata", "overview", "assumptions", "risks", "summary", "plan", "task", "tasks"}
)

TRAILING_COLON_PATTERN = re.compile(r":\s*$")


def header_category(header_text: str) -> str | None:
    """
    Category named by a header, or None for reserved or empty headers.

    Inline metadata tags and a trailing colon are removed first, so
    ``## Backend: [effort: L]`` names the category ``Backend``.
    """
    text = strip_inline_metadata(header_text)
    text = TRAILING_COLON_PATTERN.sub("", text).strip()
    if not text or text.lower() in RESERVED_HEADERS:
        return None
    return text


def _optional_str(value: Any) -> str | None:
    if value is None or isinstance(value, (bool, list)):
        return None
    return str(value)


def _optional_str_list(value: Any) -> list[str] | None:
    if isinstance(value, list):
        return [str(entry) for entry in value]
    if value is None or isinstance(value, bool):
        return None
    return [str(value)]


def metadata_from_frontmatter(
    frontmatter: dict[str, Any],
    created_at: datetime,
    source_file: str | None = None,
    generator: str = DEFAULT_GENERATOR,
) -> PlanMetadata:
    """Build plan metadata from parsed frontmatter fields."""
    fm_generator = frontmatter.get("generator")
    if isinstance(fm_generator, str) and fm_generator.strip():
        generator = fm_generator.strip()

    effort = frontmatter.get("estimatedEffort", frontmatter.get("estimated_effort"))
    risk_lines = _optional_str_list(frontmatter.get("risks"))

    return PlanMetadata(
        generated=True,
        generator=generator,
        created_at=created_at,
        source_file=source_file,
        title=_optional_str(frontmatter.get("title")),
        summary=_optional_str(frontmatter.get("summary")),
        assumptions=_optional_str_list(frontmatter.get("assumptions")),
        approach=_optional_str(frontmatter.get("approach")),
        risks=[parse_risk_line(line) for line in risk_lines] if risk_lines else None,
        estimated_effort=_optional_str(effort),
    )


def merge_section_metadata(
    metadata: PlanMetadata | None,
    sections: SectionMetadata,
    created_at: datetime,
    source_file: str | None = None,
    generator: str = DEFAULT_GENERATOR,
) -> PlanMetadata | None:
    """Overlay section-derived fields onto frontmatter metadata."""
    if sections.is_empty():
        return metadata
    if metadata is None:
        metadata = PlanMetadata(
            generator=generator,
            created_at=created_at,
            source_file=source_file,
        )
    return replace(metadata, **sections.present_fields())


def _read_task(
    cursor: LineCursor, parsed: ParsedTaskLine
) -> tuple[ParsedTaskLine, list[str], LineCursor]:
    """
    Consume the lines belonging to the task under ``cursor``.

    Returns:
        (task fields with continuation merged in, acceptance criteria,
        cursor on the first line after the task)
    """
    task_indent = indent_of(cursor.current)

    continuation, cursor = collect_continuation(cursor.advance(), task_indent)
    # Keyed tags only: the leading [tag] was already read from the task line
    combined = parse_inline_metadata(
        join_text(parsed.description, continuation), sniff_category=False
    )

    # Tags on the task line itself win over tags found on continuation lines
    merged = replace(
        parsed,
        description=combined.clean_text,
        id=parsed.id or combined.id,
        category=parsed.category or combined.category,
        effort=parsed.effort or combined.effort,
        risk=parsed.risk or combined.risk,
    )

    criteria, cursor = collect_criteria(cursor, task_indent)
    return merged, criteria, cursor


def parse_markdown_plan(
    content: str,
    *,
    source_file: str | None = None,
    default_category: str | None = None,
    generator: str = DEFAULT_GENERATOR,
) -> ParsedPlan:
    """
    Parse markdown plan content into PRD items and metadata.

    Handles plain checklists as well as structured plans with frontmatter,
    metadata sections and inline tags. Never raises for string input.

    Args:
        content: Markdown plan text
        source_file: Plan path recorded in the metadata
        default_category: Category for tasks without an inline tag. When set,
            headers no longer supply categories.
        generator: Generator name for metadata the parser creates

    Returns:
        ParsedPlan with metadata (or None), items, warnings and the
        structured-format flag
    """
    warnings: list[str] = []
    items: list[TaskItem] = []
    created_at = datetime.now(UTC)

    frontmatter_result = parse_frontmatter(content)
    body = frontmatter_result.body

    metadata: PlanMetadata | None = None
    if frontmatter_result.frontmatter is not None:
        metadata = metadata_from_frontmatter(
            frontmatter_result.frontmatter, created_at, source_file, generator
        )

    sections = parse_metadata_sections(body)
    warnings.extend(sections.warnings)
    metadata = merge_section_metadata(
        metadata, sections.metadata, created_at, source_file, generator
    )

    current_category: str | None = None
    in_code_block = False
    cursor = LineCursor.from_text(body)

    while not cursor.at_end:
        line = cursor.current
        stripped = line.strip()

        if is_fence(line):
            in_code_block = not in_code_block
            cursor = cursor.advance()
            continue
        if in_code_block or not stripped:
            cursor = cursor.advance()
            continue

        header = CATEGORY_HEADER_PATTERN.match(stripped)
        if header:
            category = header_category(header.group(1))
            if category is not None and not default_category:
                current_category = category
            cursor = cursor.advance()
            continue

        parsed = parse_task_line(line)
        if parsed is None:
            cursor = cursor.advance()
            continue

        task, criteria, cursor = _read_task(cursor, parsed)
        items.append(
            TaskItem(
                id=task.id,
                title=task.title,
                category=(
                    task.category or current_category or default_category or DEFAULT_CATEGORY
                ),
                description=task.description,
                passes=task.done,
                effort=task.effort,
                risk=task.risk,
                acceptance_criteria=criteria or None,
            )
        )

    if metadata is not None:
        metadata = replace(metadata, total_tasks=len(items))

    structured = is_structured_format(content)
    logger.debug(
        f"Parsed plan{f' {source_file}' if source_file else ''}: "
        f"{len(items)} items, structured={structured}, metadata={metadata is not None}"
    )

    return ParsedPlan(
        metadata=metadata,
        items=items,
        warnings=warnings,
        is_structured_format=structured,
    )

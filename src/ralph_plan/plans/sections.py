"""
Metadata sections.

Reads plan metadata written as markdown sections instead of (or in addition
to) frontmatter::

    ## Overview
    Title: My Project
    Summary: What it does

    ## Assumptions
    - The database is available

    ## Risks
    - API instability (likelihood: H, impact: M, mitigation: retries)
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from ralph_plan.plans.codes import normalize_risk
from ralph_plan.plans.lines import (
    BULLET_ITEM_PATTERN,
    HEADER_PATTERN,
    LineCursor,
    collect_continuation,
    indent_of,
    is_checklist_item,
    is_fence,
    join_text,
    strip_quotes,
)
from ralph_plan.plans.models import Risk, SectionMetadata, SectionParseResult

logger = logging.getLogger(__name__)


class SectionMode(str, Enum):
    """Which kind of section the scanner is inside."""

    NONE = "none"
    METADATA = "metadata"
    ASSUMPTIONS = "assumptions"
    RISKS = "risks"


# Level 1-2 headers that switch the scanner's mode, checked in order
SECTION_HEADERS: list[tuple[re.Pattern[str], SectionMode]] = [
    (re.compile(r"^##?\s+(metadata|overview|project info)", re.IGNORECASE), SectionMode.METADATA),
    (re.compile(r"^##?\s+assumptions", re.IGNORECASE), SectionMode.ASSUMPTIONS),
    (re.compile(r"^##?\s+risks", re.IGNORECASE), SectionMode.RISKS),
    (re.compile(r"^##?\s+(tasks|plan)", re.IGNORECASE), SectionMode.NONE),
]

# Metadata field -> "key: value" pattern inside a metadata section
METADATA_FIELDS: list[tuple[str, re.Pattern[str]]] = [
    ("title", re.compile(r"^(?:title|name|project)\s*:\s*(.+)$", re.IGNORECASE)),
    ("summary", re.compile(r"^(?:summary|description|overview)\s*:\s*(.+)$", re.IGNORECASE)),
    (
        "estimated_effort",
        re.compile(r"^(?:effort|estimated effort|timeline)\s*:\s*(.+)$", re.IGNORECASE),
    ),
    ("approach", re.compile(r"^(?:approach|strategy|method)\s*:\s*(.+)$", re.IGNORECASE)),
]

# Only "#" and "##" headers open or close a section
SECTION_LEVEL_PATTERN = re.compile(r"^#{1,2}\s+")

RISK_FIELD_PATTERN = re.compile(r"\b(likelihood|impact|mitigation)\s*:\s*", re.IGNORECASE)


def section_mode_for_header(line: str) -> SectionMode:
    """Mode entered by a level 1-2 header line; headers not listed end any section."""
    stripped = line.strip()
    for pattern, mode in SECTION_HEADERS:
        if pattern.match(stripped):
            return mode
    return SectionMode.NONE


def parse_risk_line(text: str) -> Risk:
    """
    Parse a risk list item.

    ``API down (likelihood: H, impact: M, mitigation: add retries)`` gives a
    structured risk; text without likelihood or impact becomes a plain risk
    with M/M severity and no mitigation.
    """
    text = text.strip()
    first = RISK_FIELD_PATTERN.search(text)
    if first is None:
        return Risk(risk=text)

    head = text[: first.start()].rstrip()
    tail = text[first.start() :].rstrip()
    if head.endswith("(") and tail.endswith(")"):
        tail = tail[:-1]
    head = head.rstrip(" \t(-,:")

    fields: dict[str, str] = {}
    parts = RISK_FIELD_PATTERN.split(tail)
    for key, value in zip(parts[1::2], parts[2::2], strict=False):
        fields.setdefault(key.lower(), value.strip().rstrip(",").strip())

    if "likelihood" not in fields and "impact" not in fields:
        return Risk(risk=text)

    return Risk(
        risk=head or text,
        likelihood=normalize_risk(fields.get("likelihood", "M")) or "M",
        impact=normalize_risk(fields.get("impact", "M")) or "M",
        mitigation=fields.get("mitigation", ""),
    )


def parse_metadata_sections(content: str) -> SectionParseResult:
    """
    Scan section headers and collect plan metadata.

    Args:
        content: Markdown body (frontmatter already removed)

    Returns:
        SectionParseResult; fields not found stay None
    """
    fields: dict[str, str] = {}
    assumptions: list[str] = []
    risks: list[Risk] = []
    mode = SectionMode.NONE
    in_code_block = False

    cursor = LineCursor.from_text(content)
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

        if HEADER_PATTERN.match(stripped):
            if SECTION_LEVEL_PATTERN.match(stripped):
                mode = section_mode_for_header(stripped)
            cursor = cursor.advance()
            continue

        if mode is SectionMode.METADATA:
            for name, pattern in METADATA_FIELDS:
                match = pattern.match(stripped)
                if match:
                    fields.setdefault(name, strip_quotes(match.group(1).strip()))
                    break
            cursor = cursor.advance()
            continue

        bullet = BULLET_ITEM_PATTERN.match(stripped)
        in_list_section = mode in (SectionMode.ASSUMPTIONS, SectionMode.RISKS)
        if in_list_section and bullet and not is_checklist_item(line):
            continuation, cursor = collect_continuation(cursor.advance(), indent_of(line))
            text = join_text(bullet.group(1).strip(), continuation)
            if mode is SectionMode.ASSUMPTIONS:
                assumptions.append(text)
            else:
                risks.append(parse_risk_line(text))
            continue

        cursor = cursor.advance()

    metadata = SectionMetadata(
        title=fields.get("title"),
        summary=fields.get("summary"),
        approach=fields.get("approach"),
        estimated_effort=fields.get("estimated_effort"),
        assumptions=assumptions or None,
        risks=risks or None,
    )
    if not metadata.is_empty():
        logger.debug(
            f"Section metadata: fields={sorted(fields)}, "
            f"assumptions={len(assumptions)}, risks={len(risks)}"
        )
    return SectionParseResult(metadata=metadata, warnings=[])

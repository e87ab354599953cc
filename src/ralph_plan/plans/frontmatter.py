"""
YAML-lite frontmatter extraction.

Only the subset plan files use is understood: ``key: value`` pairs, ``- item``
arrays under a key, and values continued on deeper-indented lines. Anything
else in the block is ignored; nothing here raises.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ralph_plan.plans.lines import indent_of, join_text, split_lines, strip_quotes
from ralph_plan.plans.models import FrontmatterResult

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"

# key: value (value may be empty when an array or continuation follows)
KEY_PATTERN = re.compile(r"^([^:\s-][^:]*?)\s*:\s*(.*)$")

INTEGER_PATTERN = re.compile(r"^\d+$")


def coerce_scalar(value: str) -> Any:
    """Convert ``true``/``false`` and digit strings; strip quotes from the rest."""
    if value == "true":
        return True
    if value == "false":
        return False
    if INTEGER_PATTERN.match(value):
        return int(value)
    return strip_quotes(value)


def find_frontmatter_bounds(lines: list[str]) -> tuple[int, int] | None:
    """
    Locate the opening and closing ``---`` lines.

    Returns:
        (open_index, close_index), or None when the first non-empty line is
        not ``---`` or no closing delimiter follows it.
    """
    start = next((i for i, line in enumerate(lines) if line.strip()), None)
    if start is None or lines[start].strip() != FRONTMATTER_DELIMITER:
        return None
    for i in range(start + 1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            return start, i
    return None


class _BlockParser:
    """Accumulates one key at a time; a key's value is flushed when the next key starts."""

    def __init__(self) -> None:
        self.entries: dict[str, Any] = {}
        self.key: str | None = None
        self.key_indent = 0
        self.scalar_parts: list[str] = []
        self.items: list[list[str]] = []
        self.item_indent = 0

    def feed(self, line: str) -> None:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return
        indent = indent_of(line)

        if stripped == "-" or stripped.startswith("- "):
            if self.key is not None:
                self.items.append([stripped[1:].strip()])
                self.item_indent = indent
            return

        if self.key is not None:
            opener_indent = self.item_indent if self.items else self.key_indent
            if indent > opener_indent:
                target = self.items[-1] if self.items else self.scalar_parts
                target.append(stripped)
                return

        match = KEY_PATTERN.match(stripped)
        if match is None:
            logger.debug(f"Ignoring unrecognized frontmatter line: {stripped!r}")
            return

        self.flush()
        self.key = match.group(1).strip()
        self.key_indent = indent
        value = match.group(2).strip()
        self.scalar_parts = [value] if value else []
        self.items = []

    def flush(self) -> None:
        if self.key is None:
            return
        if self.items:
            self.entries[self.key] = [
                strip_quotes(join_text(parts[0], parts[1:])) for parts in self.items
            ]
        elif self.scalar_parts:
            self.entries[self.key] = coerce_scalar(" ".join(self.scalar_parts))


def parse_frontmatter_block(block: list[str]) -> dict[str, Any]:
    """Parse the lines between the frontmatter delimiters into a mapping."""
    parser = _BlockParser()
    for line in block:
        parser.feed(line)
    parser.flush()
    return parser.entries


def parse_frontmatter(content: str) -> FrontmatterResult:
    """
    Split a document into frontmatter and body.

    Args:
        content: Full markdown document

    Returns:
        FrontmatterResult. When there is no complete frontmatter block,
        ``frontmatter`` is None and ``body`` is ``content`` unchanged.
    """
    lines = split_lines(content)
    bounds = find_frontmatter_bounds(lines)
    if bounds is None:
        if lines and lines[0].strip() == FRONTMATTER_DELIMITER:
            logger.debug("Frontmatter delimiter is never closed; treating document as body")
        return FrontmatterResult(frontmatter=None, body=content)

    start, end = bounds
    frontmatter = parse_frontmatter_block(lines[start + 1 : end])
    body = "\n".join(lines[end + 1 :])
    return FrontmatterResult(frontmatter=frontmatter, body=body)

"""
Line-level primitives shared by the plan parser stages.

Provides CRLF-tolerant splitting, indentation measurement, the line
classifiers (header, fence, list item, checklist item) and LineCursor, the
immutable ``(lines, position)`` value every scanning stage takes and returns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

# List marker: -, *, + or a number followed by . or )
LIST_MARKER = r"(?:[-*+]|\d+[.)])"

# Checkbox character: space, x/X, or any other non-word, non-bracket character
CHECKBOX_MARK = r"(?:[xX]|[^\w\[\]])"

# Full checklist line: (indent)(mark)(text)
CHECKLIST_PATTERN = re.compile(rf"^(\s*){LIST_MARKER}\s+\[({CHECKBOX_MARK})\]\s+(.+)$")

# Checklist start, applied to stripped text (no text required after the box)
CHECKLIST_START_PATTERN = re.compile(rf"^{LIST_MARKER}\s+\[{CHECKBOX_MARK}\](?:\s|$)")

LIST_ITEM_PATTERN = re.compile(rf"^{LIST_MARKER}\s+(.+)$")
BULLET_ITEM_PATTERN = re.compile(r"^[-*+]\s+(.+)$")

HEADER_PATTERN = re.compile(r"^#{1,6}\s+(.+)$")

FENCE_MARKER = "```"


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n`` or ``\\r\\n``."""
    return text.replace("\r\n", "\n").split("\n")


def indent_of(line: str) -> int:
    """Number of leading whitespace characters."""
    return len(line) - len(line.lstrip())


def is_blank(line: str) -> bool:
    return not line.strip()


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE_MARKER)


def is_header(line: str) -> bool:
    return HEADER_PATTERN.match(line.strip()) is not None


def is_list_item(line: str) -> bool:
    return LIST_ITEM_PATTERN.match(line.strip()) is not None


def is_checklist_item(line: str) -> bool:
    return CHECKLIST_START_PATTERN.match(line.strip()) is not None


def strip_list_marker(line: str) -> str:
    """Remove the list marker from a list line, returning the trimmed remainder."""
    stripped = line.strip()
    match = LIST_ITEM_PATTERN.match(stripped)
    if not match:
        return stripped
    return match.group(1).strip()


def strip_quotes(value: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


@dataclass(frozen=True)
class LineCursor:
    """A read position over a fixed sequence of lines.

    Scanning functions take a cursor and return a new one; a cursor is
    never moved in place.
    """

    lines: tuple[str, ...]
    position: int = 0

    @classmethod
    def from_text(cls, text: str) -> LineCursor:
        return cls(tuple(split_lines(text)))

    @classmethod
    def from_lines(cls, lines: list[str] | tuple[str, ...], position: int = 0) -> LineCursor:
        return cls(tuple(lines), position)

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.lines)

    @property
    def current(self) -> str:
        """The line under the cursor. Only valid when not ``at_end``."""
        return self.lines[self.position]

    def advance(self, count: int = 1) -> LineCursor:
        return replace(self, position=self.position + count)

    def seek(self, position: int) -> LineCursor:
        return replace(self, position=position)


def collect_continuation(
    cursor: LineCursor,
    parent_indent: int,
    allow_list_items: bool = False,
) -> tuple[list[str], LineCursor]:
    """
    Gather lines that continue the text of a parent line.

    A continuation line is indented deeper than ``parent_indent`` and is not
    blank, a header, a fence or a checklist item. Other list items stop the
    run unless ``allow_list_items`` is set.

    Args:
        cursor: Cursor positioned on the first candidate line
        parent_indent: Indentation of the line being continued
        allow_list_items: Accept deeper plain list items as continuation text

    Returns:
        Tuple of (trimmed continuation lines, cursor after the last one)
    """
    parts: list[str] = []
    while not cursor.at_end:
        line = cursor.current
        if is_blank(line) or is_header(line) or is_fence(line) or is_checklist_item(line):
            break
        if indent_of(line) <= parent_indent:
            break
        if is_list_item(line) and not allow_list_items:
            break
        parts.append(line.strip())
        cursor = cursor.advance()
    return parts, cursor


def join_text(head: str, parts: list[str]) -> str:
    """Join a line and its continuation parts with single spaces."""
    return " ".join(part for part in [head, *parts] if part)

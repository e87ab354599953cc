"""
Plan data models.

Dataclasses returned by the markdown plan parser. Python attributes are
snake_case; ``to_dict()`` emits the camelCase field names of the PRD JSON
file and drops optional fields that are ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# Generator identifier written into metadata the parser creates itself
DEFAULT_GENERATOR = "ralph-markdown-parser"

# Category used when neither the task, a header, nor the caller supplies one
DEFAULT_CATEGORY = "functional"


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class Risk:
    """A project risk with likelihood/impact codes (L, M or H)."""

    risk: str
    likelihood: str = "M"
    impact: str = "M"
    mitigation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk": self.risk,
            "likelihood": self.likelihood,
            "impact": self.impact,
            "mitigation": self.mitigation,
        }


@dataclass
class PlanMetadata:
    """Plan-level metadata gathered from frontmatter and metadata sections."""

    generated: bool = True
    generator: str = DEFAULT_GENERATOR
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    source_file: str | None = None
    title: str | None = None
    summary: str | None = None
    assumptions: list[str] | None = None
    approach: str | None = None
    risks: list[Risk] | None = None
    estimated_effort: str | None = None
    total_tasks: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the PRD ``metadata`` object."""
        return _drop_none(
            {
                "generated": self.generated,
                "generator": self.generator,
                "createdAt": format_timestamp(self.created_at),
                "sourceFile": self.source_file,
                "title": self.title,
                "summary": self.summary,
                "assumptions": list(self.assumptions) if self.assumptions is not None else None,
                "approach": self.approach,
                "risks": (
                    [risk.to_dict() for risk in self.risks] if self.risks is not None else None
                ),
                "estimatedEffort": self.estimated_effort,
                "totalTasks": self.total_tasks,
            }
        )


@dataclass
class TaskItem:
    """A single PRD item produced from a checklist line."""

    category: str
    description: str
    passes: bool
    id: str | None = None
    title: str | None = None
    effort: str | None = None
    risk: str | None = None
    acceptance_criteria: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a PRD ``items`` entry."""
        return _drop_none(
            {
                "id": self.id,
                "title": self.title,
                "category": self.category,
                "description": self.description,
                "passes": self.passes,
                "effort": self.effort,
                "risk": self.risk,
                "acceptanceCriteria": (
                    list(self.acceptance_criteria)
                    if self.acceptance_criteria is not None
                    else None
                ),
            }
        )


@dataclass
class ParsedPlan:
    """Result of parsing a markdown plan document."""

    metadata: PlanMetadata | None
    items: list[TaskItem]
    warnings: list[str] = field(default_factory=list)
    is_structured_format: bool = False

    @property
    def total_count(self) -> int:
        return len(self.items)

    @property
    def done_count(self) -> int:
        """Number of items whose checkbox was ticked."""
        return sum(1 for item in self.items if item.passes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict() if self.metadata is not None else None,
            "items": [item.to_dict() for item in self.items],
            "warnings": list(self.warnings),
            "isStructuredFormat": self.is_structured_format,
        }


# =============================================================================
# Intermediate stage results
# =============================================================================


@dataclass
class FrontmatterResult:
    """Frontmatter mapping (or None) and the remaining document body."""

    frontmatter: dict[str, Any] | None
    body: str


@dataclass
class InlineMetadata:
    """Tags pulled out of a line of text, plus the text without them."""

    clean_text: str
    id: str | None = None
    category: str | None = None
    effort: str | None = None
    risk: str | None = None


@dataclass
class ParsedTaskLine:
    """Decomposition of one checklist line."""

    done: bool
    description: str
    id: str | None = None
    title: str | None = None
    category: str | None = None
    effort: str | None = None
    risk: str | None = None


@dataclass
class CriteriaResult:
    """Acceptance criteria and the first line index not consumed."""

    criteria: list[str]
    end_index: int


@dataclass
class SectionMetadata:
    """Metadata fields found in ``## Overview``-style sections."""

    title: str | None = None
    summary: str | None = None
    approach: str | None = None
    estimated_effort: str | None = None
    assumptions: list[str] | None = None
    risks: list[Risk] | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.title,
                self.summary,
                self.approach,
                self.estimated_effort,
                self.assumptions,
                self.risks,
            )
        )

    def present_fields(self) -> dict[str, Any]:
        """Fields that were found, keyed by PlanMetadata attribute name."""
        return _drop_none(
            {
                "title": self.title,
                "summary": self.summary,
                "approach": self.approach,
                "estimated_effort": self.estimated_effort,
                "assumptions": self.assumptions,
                "risks": self.risks,
            }
        )


@dataclass
class SectionParseResult:
    metadata: SectionMetadata
    warnings: list[str] = field(default_factory=list)


@dataclass
class PrdJsonResult:
    """Serialized PRD JSON and the warnings produced while parsing."""

    json: str
    warnings: list[str] = field(default_factory=list)

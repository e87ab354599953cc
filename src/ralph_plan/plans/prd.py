"""
PRD JSON envelope.

The PRD file is the contract with the agent loop::

    {"metadata": {...}, "items": [{"description": ..., "passes": false, ...}]}

``passes`` and the other field names are read by the task-selection loop and
must not change.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ralph_plan.plans.models import (
    DEFAULT_GENERATOR,
    ParsedPlan,
    PlanMetadata,
    PrdJsonResult,
    Risk,
)
from ralph_plan.plans.parser import parse_markdown_plan

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdx")
PRD_FILENAME = "prd.json"


def build_prd(
    result: ParsedPlan,
    source_file: str | None = None,
    generator: str = DEFAULT_GENERATOR,
) -> dict[str, Any]:
    """
    Wrap a parse result in the PRD envelope.

    Plans without metadata get a default generated-metadata block.
    """
    metadata = result.metadata
    if metadata is None:
        metadata = PlanMetadata(
            generator=generator,
            source_file=source_file,
            total_tasks=len(result.items),
        )
    return {
        "metadata": metadata.to_dict(),
        "items": [item.to_dict() for item in result.items],
    }


def markdown_to_prd_json(
    content: str,
    *,
    source_file: str | None = None,
    default_category: str | None = None,
    generator: str = DEFAULT_GENERATOR,
    indent: int = 2,
) -> PrdJsonResult:
    """
    Convert markdown plan content to a PRD JSON string.

    Args:
        content: Markdown plan text
        source_file: Plan path recorded in the metadata
        default_category: Category for tasks without an inline tag
        generator: Generator name for metadata the parser creates
        indent: JSON indentation

    Returns:
        PrdJsonResult with the pretty-printed JSON and parser warnings
    """
    result = parse_markdown_plan(
        content,
        source_file=source_file,
        default_category=default_category,
        generator=generator,
    )
    prd = build_prd(result, source_file=source_file, generator=generator)
    return PrdJsonResult(
        json=json.dumps(prd, indent=indent, ensure_ascii=False),
        warnings=list(result.warnings),
    )


def _load_json_object(content: str) -> dict[str, Any] | None:
    trimmed = content.strip()
    if not trimmed.startswith("{"):
        return None
    try:
        parsed = json.loads(trimmed)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def is_generated_prd(content: str) -> bool:
    """Whether ``content`` is a PRD whose metadata says it was generated."""
    parsed = _load_json_object(content)
    if parsed is None:
        return False
    metadata = parsed.get("metadata")
    if not isinstance(metadata, dict):
        return False
    generator = metadata.get("generator")
    return metadata.get("generated") is True and isinstance(generator, str) and bool(generator)


def _parse_created_at(value: Any) -> datetime:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparseable createdAt {value!r}; using current time")
    return datetime.now(UTC)


def _parse_risks(value: Any) -> list[Risk] | None:
    if not isinstance(value, list):
        return None
    risks: list[Risk] = []
    for entry in value:
        if isinstance(entry, dict) and isinstance(entry.get("risk"), str):
            risks.append(
                Risk(
                    risk=entry["risk"],
                    likelihood=str(entry.get("likelihood", "M")),
                    impact=str(entry.get("impact", "M")),
                    mitigation=str(entry.get("mitigation", "")),
                )
            )
    return risks


def _optional(value: Any, kind: type) -> Any:
    return value if isinstance(value, kind) else None


def parse_prd_metadata(content: str) -> PlanMetadata | None:
    """
    Read the metadata block of a PRD JSON document.

    Returns:
        PlanMetadata, or None when the content is not a JSON object with a
        ``metadata`` object
    """
    parsed = _load_json_object(content)
    if parsed is None or not isinstance(parsed.get("metadata"), dict):
        return None
    meta = parsed["metadata"]

    total_tasks = meta.get("totalTasks")
    assumptions = meta.get("assumptions")
    return PlanMetadata(
        generated=meta.get("generated") is True,
        generator=_optional(meta.get("generator"), str) or "",
        created_at=_parse_created_at(meta.get("createdAt")),
        source_file=_optional(meta.get("sourceFile"), str),
        title=_optional(meta.get("title"), str),
        summary=_optional(meta.get("summary"), str),
        assumptions=[str(a) for a in assumptions] if isinstance(assumptions, list) else None,
        approach=_optional(meta.get("approach"), str),
        risks=_parse_risks(meta.get("risks")),
        estimated_effort=_optional(meta.get("estimatedEffort"), str),
        total_tasks=(
            total_tasks
            if isinstance(total_tasks, int) and not isinstance(total_tasks, bool)
            else None
        ),
    )


def normalize_prd_items(items: list[Any]) -> tuple[list[Any], int]:
    """
    Give every item a boolean ``passes`` field.

    Items missing it get ``passes = (status == "done")``. Non-dict entries
    pass through untouched.

    Returns:
        (normalized items, number of items changed)
    """
    normalized: list[Any] = []
    changed = 0
    for item in items:
        if isinstance(item, dict) and not isinstance(item.get("passes"), bool):
            normalized.append({**item, "passes": item.get("status") == "done"})
            changed += 1
        else:
            normalized.append(item)
    return normalized, changed


def is_markdown_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() in MARKDOWN_EXTENSIONS


def resolve_plan_target(path: str | Path) -> tuple[Path, str | None]:
    """
    Pick where PRD JSON should be written.

    A markdown path is never overwritten: the target becomes ``prd.json``
    next to it, with a warning.

    Returns:
        (target path, warning or None)
    """
    path = Path(path)
    if not is_markdown_path(path):
        return path, None
    target = path.parent / PRD_FILENAME
    return target, f'Preserving markdown plan "{path}" and writing PRD JSON to "{target}".'

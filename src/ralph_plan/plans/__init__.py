"""
Markdown plan parsing.

Converts markdown plan documents into PRD task lists:
- frontmatter: YAML-lite header block
- sections: ``## Overview`` / ``## Assumptions`` / ``## Risks`` metadata
- inline: ``[effort: M]`` style tags
- task_line / criteria: checklist items and their acceptance criteria
- detector: structured-format heuristics
- parser: the one-pass orchestrator
- prd: the PRD JSON envelope
"""

from ralph_plan.plans.codes import normalize_effort, normalize_risk
from ralph_plan.plans.criteria import collect_criteria, parse_acceptance_criteria
from ralph_plan.plans.detector import is_structured_format
from ralph_plan.plans.frontmatter import parse_frontmatter
from ralph_plan.plans.inline import parse_inline_metadata
from ralph_plan.plans.models import (
    DEFAULT_CATEGORY,
    DEFAULT_GENERATOR,
    CriteriaResult,
    FrontmatterResult,
    InlineMetadata,
    ParsedPlan,
    ParsedTaskLine,
    PlanMetadata,
    PrdJsonResult,
    Risk,
    SectionMetadata,
    SectionParseResult,
    TaskItem,
)
from ralph_plan.plans.parser import parse_markdown_plan
from ralph_plan.plans.prd import (
    build_prd,
    is_generated_prd,
    is_markdown_path,
    markdown_to_prd_json,
    normalize_prd_items,
    parse_prd_metadata,
    resolve_plan_target,
)
from ralph_plan.plans.sections import SectionMode, parse_metadata_sections, parse_risk_line
from ralph_plan.plans.task_line import parse_task_line

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_GENERATOR",
    "CriteriaResult",
    "FrontmatterResult",
    "InlineMetadata",
    "ParsedPlan",
    "ParsedTaskLine",
    "PlanMetadata",
    "PrdJsonResult",
    "Risk",
    "SectionMetadata",
    "SectionMode",
    "SectionParseResult",
    "TaskItem",
    "build_prd",
    "collect_criteria",
    "is_generated_prd",
    "is_markdown_path",
    "is_structured_format",
    "markdown_to_prd_json",
    "normalize_effort",
    "normalize_prd_items",
    "normalize_risk",
    "parse_acceptance_criteria",
    "parse_frontmatter",
    "parse_inline_metadata",
    "parse_markdown_plan",
    "parse_metadata_sections",
    "parse_prd_metadata",
    "parse_risk_line",
    "parse_task_line",
    "resolve_plan_target",
]

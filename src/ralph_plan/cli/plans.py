"""
Plan conversion commands.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from ralph_plan.cli.utils import read_plan, write_output
from ralph_plan.config.app import AppConfig, apply_cli_overrides
from ralph_plan.plans.detector import is_structured_format
from ralph_plan.plans.parser import parse_markdown_plan
from ralph_plan.plans.prd import markdown_to_prd_json, resolve_plan_target

logger = logging.getLogger(__name__)


def _get_config(ctx: click.Context) -> AppConfig:
    obj = ctx.find_object(dict)
    if obj is None or "config" not in obj:
        return AppConfig()
    config: AppConfig = obj["config"]
    return config


def _with_overrides(config: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    """Re-validate ``config`` with command option overrides applied."""
    try:
        return AppConfig(**apply_cli_overrides(config.model_dump(), overrides))
    except ValidationError as e:
        raise click.ClickException(f"Invalid option value: {e}") from e


@click.command("convert")
@click.argument("plan", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write PRD JSON to this path instead of stdout (markdown paths map to prd.json)",
)
@click.option(
    "--category",
    "default_category",
    help="Category for tasks without an inline tag (disables header categories)",
)
@click.pass_context
def convert_cmd(
    ctx: click.Context, plan: str, output: str | None, default_category: str | None
) -> None:
    """Convert a markdown plan into PRD JSON."""
    config = _with_overrides(_get_config(ctx), {"parser.default_category": default_category})
    settings = config.parser
    content = read_plan(plan)

    result = markdown_to_prd_json(
        content,
        source_file=plan,
        default_category=settings.default_category,
        generator=settings.generator,
        indent=settings.json_indent,
    )
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if output is None:
        click.echo(result.json)
        return

    target, warning = resolve_plan_target(output)
    if warning:
        click.echo(f"Warning: {warning}", err=True)
    write_output(target, result.json)
    logger.info(f"Wrote PRD JSON for {plan} to {target}")
    click.echo(f"Wrote {target}")


@click.command("inspect")
@click.argument("plan", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def inspect_cmd(ctx: click.Context, plan: str) -> None:
    """Show a summary of the tasks in a markdown plan."""
    settings = _get_config(ctx).parser
    result = parse_markdown_plan(
        read_plan(plan),
        source_file=plan,
        default_category=settings.default_category,
        generator=settings.generator,
    )

    metadata = result.metadata
    title = metadata.title if metadata and metadata.title else Path(plan).name
    click.echo(f"Plan: {title}")
    click.echo(f"Format: {'structured' if result.is_structured_format else 'simple'}")
    click.echo(f"Tasks: {result.done_count}/{result.total_count} done")

    for category, count in Counter(item.category for item in result.items).items():
        click.echo(f"  {category}: {count}")

    if metadata and metadata.estimated_effort:
        click.echo(f"Estimated effort: {metadata.estimated_effort}")
    if metadata and metadata.assumptions:
        click.echo(f"Assumptions: {len(metadata.assumptions)}")
    if metadata and metadata.risks:
        click.echo(f"Risks: {len(metadata.risks)}")


@click.command("detect")
@click.argument("plan", type=click.Path(exists=True, dir_okay=False))
def detect_cmd(plan: str) -> None:
    """Print whether a plan uses the structured format."""
    click.echo("structured" if is_structured_format(read_plan(plan)) else "simple")

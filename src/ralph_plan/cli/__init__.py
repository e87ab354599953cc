"""
ralph-plan CLI entry point.
"""

import click

from ralph_plan.cli.plans import convert_cmd, detect_cmd, inspect_cmd
from ralph_plan.cli.utils import setup_logging
from ralph_plan.config.app import load_config


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """ralph-plan - Convert markdown plans into PRD task lists."""
    ctx.ensure_object(dict)
    try:
        app_config = load_config(config, {"logging.level": "debug" if verbose else None})
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(app_config.logging)
    ctx.obj["config"] = app_config


cli.add_command(convert_cmd)
cli.add_command(inspect_cmd)
cli.add_command(detect_cmd)

__all__ = ["cli"]

"""Allow ``python -m ralph_plan``."""

from ralph_plan.cli import cli

if __name__ == "__main__":
    cli()

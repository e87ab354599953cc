"""
Configuration package for ralph-plan.

Pydantic config models and YAML loading:
- ParserSettings: default category, generator name, JSON indentation
- LoggingSettings: log level and format
- AppConfig: the root model
"""

from ralph_plan.config.app import (
    AppConfig,
    LoggingSettings,
    ParserSettings,
    apply_cli_overrides,
    load_config,
    load_yaml,
)

__all__ = [
    "AppConfig",
    "LoggingSettings",
    "ParserSettings",
    "apply_cli_overrides",
    "load_config",
    "load_yaml",
]

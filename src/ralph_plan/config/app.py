"""
Configuration management for ralph-plan.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from ralph_plan.plans.models import DEFAULT_GENERATOR

DEFAULT_CONFIG_FILE = "~/.ralph/config.yaml"


class ParserSettings(BaseModel):
    """Markdown plan parser configuration."""

    default_category: str | None = Field(
        default=None,
        description="Category for tasks without an inline tag. "
        "When set, section headers no longer supply categories.",
    )
    generator: str = Field(
        default=DEFAULT_GENERATOR,
        description="Generator name written into metadata the parser creates",
    )
    json_indent: int = Field(
        default=2,
        description="Indentation of the emitted PRD JSON",
    )

    @field_validator("generator")
    @classmethod
    def validate_generator(cls, v: str) -> str:
        """Validate generator is not blank."""
        if not v.strip():
            raise ValueError("generator must not be empty")
        return v.strip()

    @field_validator("default_category")
    @classmethod
    def validate_default_category(cls, v: str | None) -> str | None:
        """Treat a blank category as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("json_indent")
    @classmethod
    def validate_json_indent(cls, v: int) -> int:
        """Validate indentation is in a sensible range."""
        if not (0 <= v <= 8):
            raise ValueError("json_indent must be between 0 and 8")
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Log level",
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Log format (text or json)",
    )


class AppConfig(BaseModel):
    """
    Main configuration for ralph-plan.

    Loaded from ~/.ralph/config.yaml by default; every section has defaults,
    so an empty or missing file is valid.
    """

    parser: ParserSettings = Field(
        default_factory=ParserSettings,
        description="Markdown plan parser settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging settings",
    )


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML or JSON configuration file.

    Args:
        config_file: Path to YAML or JSON configuration file

    Returns:
        Dictionary with parsed YAML/JSON content (empty if the file is missing)

    Raises:
        ValueError: If YAML/JSON is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Config file must have .yaml, .yml, or .json extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        with open(config_path, encoding="utf-8") as f:
            content = f.read()

        if file_ext == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            data = yaml.safe_load(content)

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping at the top level: {config_path}")
    return data


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides; dotted keys such as
            ``parser.default_category`` address nested sections and None
            values are skipped

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if value is None:
            continue
        if "." in key:
            parts = key.split(".")
            current = config_dict
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = value
        else:
            config_dict[key] = value

    return config_dict


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with hierarchy: CLI > YAML > Defaults.

    Args:
        config_file: Path to YAML config file (default: ~/.ralph/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides

    Returns:
        Validated AppConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = DEFAULT_CONFIG_FILE

    config_dict = load_yaml(config_file)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return AppConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your configuration file at {config_file}"
        ) from e

"""
Configuration management for zman.

Provides YAML-based configuration with CLI overrides,
configuration hierarchy (CLI > YAML > Defaults), and validation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = "config.yaml"


def get_zman_home() -> Path:
    """Get zman home directory, respecting ZMAN_HOME env var.

    Returns:
        Path to zman home (~/.zman by default, or ZMAN_HOME if set)
    """
    zman_home = os.environ.get("ZMAN_HOME")
    if zman_home:
        return Path(zman_home)
    return Path.home() / ".zman"


class ZellijSettings(BaseModel):
    """How zman talks to zellij."""

    command: str = Field(
        default="zellij",
        description="Path or name of the zellij binary.",
    )
    cache_dir: str | None = Field(
        default=None,
        description=(
            "Base zellij cache directory (without the version component). "
            "Defaults to the platform location zellij itself uses."
        ),
    )
    timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for each captured zellij call.",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Maximum concurrent layout fetches (default: CPU count).",
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class InstallSettings(BaseModel):
    """Defaults for ``zman-install``."""

    bin_dir: str = Field(
        default="~/bin",
        description="Directory to symlink scripts into.",
    )
    script_suffix: str = Field(
        default=".py",
        description="Suffix of installable scripts; stripped from the link name.",
    )
    script_dirs: list[str] = Field(
        default_factory=lambda: [".", "meta"],
        description="Directories (relative to the repo) scanned for scripts.",
    )
    completions_dir: str = Field(
        default="completions",
        description="Directory (relative to the repo) holding <script>.<shell> files.",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        description="Log level",
    )


class AppConfig(BaseModel):
    """Top-level zman configuration."""

    zellij: ZellijSettings = Field(default_factory=ZellijSettings)
    install: InstallSettings = Field(default_factory=InstallSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        Dictionary with parsed YAML content

    Raises:
        ValueError: If YAML is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml"]:
        raise ValueError(
            f"Config file must have .yaml or .yml extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        with open(config_path) as f:
            content = f.read()

        data = yaml.safe_load(content)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")
        return data

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Nested keys use dots, e.g. ``"zellij.command"``. ``None`` values are
    skipped so unset CLI options never clobber the file.
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
                if part not in current:
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
        config_file: Path to YAML config file (default: ~/.zman/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides

    Returns:
        Validated AppConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = str(get_zman_home() / DEFAULT_CONFIG_NAME)

    config_path = Path(config_file).expanduser()

    config_dict = load_yaml(config_file)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return AppConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\nFile: {config_path}"
        ) from e

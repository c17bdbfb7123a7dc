"""
Shared utilities for CLI commands.
"""

import logging
from typing import Any

import click

from zman.config.app import AppConfig, load_config
from zman.zellij.errors import ZmanError
from zman.zellij.session_manager import ZellijSessionManager

logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = frozenset({"", "y", "yes"})


def setup_logging(level: str = "warning") -> None:
    """
    Configure logging for CLI.

    Args:
        level: Level name from the merged configuration (``--verbose``
            arrives here as ``"debug"``)
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # asyncio logs subprocess transport details at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def verbosity_override(verbose: bool) -> dict[str, Any]:
    """Map ``-v/--verbose`` onto the ``logging.level`` setting."""
    return {"logging.level": "debug" if verbose else None}


def get_config(
    ctx: click.Context,
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load configuration for a command: CLI options > YAML > defaults.

    A ``--config`` given to the ``zman`` group is used when the command
    itself was not given one.
    """
    if config_file is None and isinstance(ctx.obj, dict):
        config_file = ctx.obj.get("config_file")
    try:
        return load_config(config_file, cli_overrides)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def get_session_manager(config: AppConfig) -> ZellijSessionManager:
    """Get a session manager for the configured zellij binary."""
    return ZellijSessionManager(config.zellij)


def is_affirmative(answer: str) -> bool:
    """Decide a ``[Y/n]`` prompt: empty, ``y`` and ``yes`` (any case) accept."""
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


def confirm(question: str) -> bool:
    """Ask a ``[Y/n]`` question on the terminal, defaulting to yes."""
    answer = click.prompt(
        f"{question} [Y/n]",
        default="",
        show_default=False,
        prompt_suffix=" ",
    )
    return is_affirmative(answer)


def info(message: str) -> None:
    click.echo(f"{click.style('Info', fg='blue')}: {message}")


def warn(message: str) -> None:
    click.echo(f"{click.style('Warning', fg='yellow')}: {message}")


def success(message: str) -> None:
    click.echo(f"{click.style('Success', fg='green')}: {message}")


def to_click_error(error: ZmanError) -> click.ClickException:
    """Wrap a zman error so click prints it and exits non-zero."""
    return click.ClickException(str(error))

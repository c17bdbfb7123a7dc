"""
zman CLI entry point.
"""

import click

from .install import install
from .sessions import z


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None) -> None:
    """zman - zellij session manager and script installer."""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config


# Register commands
cli.add_command(z)
cli.add_command(install)

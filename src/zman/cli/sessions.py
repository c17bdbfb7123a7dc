"""
Session management CLI command (``z``).

``z`` with no arguments lists every session with its short hash prefix and
a summary of its tabs. ``z NAME`` (or ``z PREFIX``) attaches to a session,
or switches to it when already inside zellij, and offers to create or
resurrect sessions that are missing.
"""

import asyncio
import logging
from collections.abc import Sequence

import click

from zman.cli.utils import (
    confirm,
    get_config,
    get_session_manager,
    info,
    setup_logging,
    success,
    to_click_error,
    verbosity_override,
    warn,
)
from zman.zellij.errors import ZellijCommandError, ZmanError
from zman.zellij.identity import find_session, require_session
from zman.zellij.listing import get_current_session
from zman.zellij.models import SessionRecord, SessionTabs
from zman.zellij.session_manager import ZellijSessionManager
from zman.zellij.tabs import fetch_all

logger = logging.getLogger(__name__)

PLACEHOLDER = "-"


def _dim(text: str) -> str:
    return click.style(text, dim=True)


def _hint(name: str) -> str:
    return click.style(f"z {name}", fg="cyan")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_simple(sessions: Sequence[SessionRecord]) -> None:
    """Print one session name per line, marking the current one."""
    for session in sessions:
        if session.is_current:
            click.echo(f"{session.name} {_dim('(current)')}")
        else:
            click.echo(session.name)


def render_sessions_with_tabs(results: Sequence[SessionTabs]) -> None:
    """Print sessions with their prefixes and tab summaries."""
    if not results:
        click.echo(_dim("No active zellij sessions found."))
        click.echo()
        click.echo(f"Start a new session with: {click.style('zellij', fg='green')}")
        click.echo(f"Start a named session with: {click.style('zellij -s <name>', fg='green')}")
        return

    for i, result in enumerate(results):
        session = result.session
        prefix = click.style(result.prefix, fg="yellow", bold=True)
        if session.is_current:
            marker = click.style("*", fg="green", bold=True)
            name = click.style(session.name, fg="green", bold=True)
            click.echo(f"{prefix} {marker} {name} {_dim('(current)')}")
        else:
            exited = f" {_dim('(exited)')}" if session.is_exited else ""
            click.echo(f"{prefix} {click.style(session.name, fg='cyan')}{exited}")

        if result.ok:
            for tab in result.tabs:
                command = tab.command or PLACEHOLDER
                cwd = tab.cwd or PLACEHOLDER
                click.echo(
                    f"    {_dim(tab.name)} {click.style(command, fg='blue', dim=True)} {_dim(cwd)}"
                )
        else:
            click.echo(f"    {_dim('[Unable to fetch tabs]')}")

        if i < len(results) - 1:
            click.echo()

    click.echo(
        f"\n{click.style('Usage', fg='yellow')}: "
        f"{click.style('z <session-name>', bold=True)} or "
        f"{click.style('z <hash-prefix>', bold=True)} to attach"
    )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


def create_session(manager: ZellijSessionManager, name: str) -> None:
    """Create *name*; in the background when already inside a session."""
    info(f"Creating session '{click.style(name, fg='green')}'")
    detached = get_current_session() is not None
    manager.create_session(name, detached=detached)
    if detached:
        click.echo(f"Session '{name}' created. Use '{_hint(name)}' to switch to it.")


def resurrect_session(manager: ZellijSessionManager, name: str) -> None:
    """Bring an exited session back, offering a clean re-create if that fails."""
    info(f"Resurrecting dead session '{click.style(name, fg='green')}'")
    if manager.attach(name):
        return

    # attach can fail without a terminal yet still resurrect the session
    if manager.is_live(name):
        success(f"Session '{name}' has been resurrected")
        click.echo(f"Use '{_hint(name)}' to attach to it")
        return

    warn("Session appears to be corrupted.")
    if not confirm("Would you like to delete it and create a new one?"):
        raise click.ClickException("Session resurrection cancelled")

    info(f"Deleting dead session '{click.style(name, fg='yellow')}'")
    manager.delete_session(name)
    create_session(manager, name)


def offer_to_create_session(manager: ZellijSessionManager, name: str) -> None:
    """Offer to resurrect an exited session called *name*, or to create it."""
    if manager.find_exited_session(name) is not None:
        info(f"Session '{click.style(name, fg='cyan')}' exists but is dead.")
        if confirm("Would you like to resurrect it?"):
            resurrect_session(manager, name)
        else:
            click.echo("Session resurrection cancelled.")
        return

    info(f"Session '{click.style(name, fg='cyan')}' does not exist.")
    if confirm("Would you like to create it?"):
        create_session(manager, name)
    else:
        click.echo("Session creation cancelled.")


def attach_or_switch_session(
    manager: ZellijSessionManager,
    query: str,
    sessions: Sequence[SessionRecord],
) -> None:
    """Attach to (or switch to) the session matching *query* by name or prefix."""
    target = find_session(query, sessions)
    if target is None:
        offer_to_create_session(manager, query)
        return

    current = get_current_session()
    if current is None:
        if not manager.attach(target.name):
            raise ZellijCommandError("Failed to attach to session", session_name=target.name)
        return

    if target.name == current:
        info(f"Already in session '{click.style(current, fg='yellow')}'")
        return

    info(
        f"Switching from '{click.style(current, fg='yellow')}' "
        f"to '{click.style(target.name, fg='green')}'"
    )
    manager.switch(target.name)


def kill_session(
    manager: ZellijSessionManager,
    query: str,
    sessions: Sequence[SessionRecord],
) -> None:
    """Kill the session matching *query*, refusing to kill the current one."""
    target = require_session(query, sessions)
    if target.name == get_current_session():
        raise click.ClickException(
            "Cannot kill the current session. Exit first or switch to another session."
        )

    info(f"Killing session '{click.style(target.name, fg='red')}'")
    manager.kill_session(target.name)
    click.echo(f"Session '{target.name}' killed.")


def rename_session(
    manager: ZellijSessionManager,
    query: str,
    new_name: str,
    sessions: Sequence[SessionRecord],
) -> None:
    """Rename the session matching *query* to *new_name*."""
    target = require_session(query, sessions)
    if any(s.name == new_name for s in sessions):
        raise click.ClickException(f"Session '{new_name}' already exists")

    info(
        f"Renaming session '{click.style(target.name, fg='yellow')}' "
        f"to '{click.style(new_name, fg='green')}'"
    )
    in_current = get_current_session() == target.name
    manager.rename_session(target.name, new_name, in_current=in_current)
    click.echo("Session renamed successfully.")


def show_sessions(
    manager: ZellijSessionManager,
    sessions: Sequence[SessionRecord],
) -> None:
    """Fetch tabs for every session concurrently and print them."""
    results = asyncio.run(fetch_all(manager, sessions))
    render_sessions_with_tabs(results)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@click.command("sessions")
@click.argument("session", required=False)
@click.argument("new_name", required=False)
@click.option("--new", "-n", "new", is_flag=True, help="Create a new session")
@click.option("--kill", "-k", is_flag=True, help="Kill/delete a session")
@click.option("--list", "-l", "list_only", is_flag=True, help="List sessions (names only)")
@click.option("--rename", "-r", is_flag=True, help="Rename a session (provide old and new names)")
@click.option("--include-exited", "-x", is_flag=True, help="Include exited sessions")
@click.option("--completions", is_flag=True, hidden=True, help="Output completion options")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.pass_context
def z(
    ctx: click.Context,
    session: str | None,
    new_name: str | None,
    new: bool,
    kill: bool,
    list_only: bool,
    rename: bool,
    include_exited: bool,
    completions: bool,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Enhanced zellij session manager.

    SESSION is a session name or hash prefix to attach to.
    """
    config = get_config(ctx, config_file, verbosity_override(verbose))
    setup_logging(config.logging.level)
    manager = get_session_manager(config)

    try:
        sessions = manager.list_sessions(include_exited=include_exited)

        if completions:
            for record in sessions:
                click.echo(record.name)
            return

        if list_only:
            render_simple(sessions)
        elif new:
            if not session:
                raise click.UsageError("Session name required for --new flag")
            create_session(manager, session)
        elif kill:
            if not session:
                raise click.UsageError("Session name required for --kill flag")
            kill_session(manager, session, sessions)
        elif rename:
            if not session:
                raise click.UsageError("Old session name required for --rename flag")
            if not new_name:
                raise click.UsageError("New session name required for --rename flag")
            rename_session(manager, session, new_name, sessions)
        elif session:
            attach_or_switch_session(manager, session, sessions)
        else:
            show_sessions(manager, sessions)
    except ZmanError as e:
        raise to_click_error(e) from e

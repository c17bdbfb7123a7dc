"""
Installation command (``zman-install``).

Symlinks executable scripts into a bin directory and copies matching
shell completions into the directory the user's shell reads them from.
"""

import logging
from pathlib import Path

import click

from zman.cli.installers import (
    InstallError,
    InstallOutcome,
    completion_files_for,
    completion_script_name,
    detect_shell,
    expand_tilde,
    find_scripts,
    get_completion_dir,
    install_completion,
    install_script,
    is_on_path,
)
from zman.cli.utils import get_config, setup_logging, to_click_error, verbosity_override

logger = logging.getLogger(__name__)

RULE = "─" * 38


def _report(name: str, outcome: InstallOutcome, dry_run: bool) -> None:
    if outcome is InstallOutcome.ALREADY_INSTALLED:
        click.echo(f"   {click.style('✓', fg='green', dim=True)} {click.style(name, dim=True)} "
                   f"{click.style('(already installed)', dim=True)}")
    elif outcome is InstallOutcome.UPDATED:
        click.echo(f"   {click.style('🔄', fg='yellow')} {click.style(name, bold=True)} "
                   f"{click.style('(updating symlink)', dim=True)}")
    else:
        mark = "→" if dry_run else "✓"
        click.echo(f"   {click.style(mark, fg='green', bold=True)} {click.style(name, bold=True)}")


@click.command("install")
@click.argument("scripts", nargs=-1)
@click.option("--bin-dir", "-b", default=None, help="Directory to symlink scripts into [default: ~/bin]")
@click.option("--shell", "-s", default=None, help="Shell to set up completions for (fish, bash, zsh)")
@click.option("--force", "-f", is_flag=True, help="Overwrite regular files in the way of symlinks")
@click.option("--dry-run", is_flag=True, help="List what would be installed without doing it")
@click.option(
    "--repo-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository holding the scripts [default: current directory]",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.pass_context
def install(
    ctx: click.Context,
    scripts: tuple[str, ...],
    bin_dir: str | None,
    shell: str | None,
    force: bool,
    dry_run: bool,
    repo_dir: Path | None,
    verbose: bool,
    config_file: str | None,
) -> None:
    """Install scripts and shell completions.

    Installs SCRIPTS by name, or every executable script when none are given.
    """
    overrides = {"install.bin_dir": bin_dir, **verbosity_override(verbose)}
    config = get_config(ctx, config_file, overrides)
    setup_logging(config.logging.level)
    settings = config.install

    repo = (repo_dir or Path.cwd()).resolve()
    target_dir = expand_tilde(settings.bin_dir)
    shell_name = shell or detect_shell()

    try:
        if not dry_run:
            try:
                target_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise InstallError(f"Failed to create bin directory {target_dir}: {e}") from e

        found = find_scripts(
            repo,
            names=list(scripts),
            suffix=settings.script_suffix,
            script_dirs=settings.script_dirs,
        )

        if dry_run:
            click.echo(click.style(RULE, dim=True))
            click.secho("DRY RUN MODE", fg="yellow", bold=True)
            click.secho("No changes will be made", fg="yellow")
            click.echo(click.style(RULE, dim=True))
            click.echo()

        click.echo(f"{click.style('📦 Scripts', bold=True)} {click.style(f'({len(found)} found)', dim=True)}")
        click.echo(f"   {click.style('Target:', dim=True)} {click.style(str(target_dir), fg='cyan')}")
        click.echo()

        for script in found:
            outcome = install_script(
                script, target_dir, suffix=settings.script_suffix, force=force, dry_run=dry_run
            )
            _report(script.name.removesuffix(settings.script_suffix), outcome, dry_run)

        if shell_name:
            _install_completions(repo, shell_name, found, settings.script_suffix,
                                 settings.completions_dir, dry_run)
    except InstallError as e:
        raise to_click_error(e) from e

    if not dry_run:
        click.echo()
        click.echo(click.style(RULE, dim=True))
    click.echo()
    click.echo(f"✨ {click.style('Done!', fg='green', bold=True)}")

    if not is_on_path(target_dir):
        click.echo()
        click.echo(f"{click.style('⚠️ ', fg='yellow')} {click.style(str(target_dir), fg='yellow')} "
                   f"{click.style('is not in your PATH', dim=True)}")
        click.echo()
        export_line = f'export PATH="{target_dir}:$PATH"'
        click.echo("   Add to your shell configuration:")
        click.echo(f"   {click.style(export_line, fg='cyan')}")


def _install_completions(
    repo: Path,
    shell_name: str,
    scripts: list[Path],
    suffix: str,
    completions_dir: str,
    dry_run: bool,
) -> None:
    click.echo()
    click.echo(f"{click.style('🐚 Completions', bold=True)} {click.style('for', dim=True)} "
               f"{click.style(shell_name, fg='cyan')}")

    completion_dir = get_completion_dir(shell_name)
    if completion_dir is None:
        click.echo(f"   {click.style('⚠️ ', fg='yellow')} Unknown shell: {shell_name}")
        return

    files = completion_files_for(repo / completions_dir, shell_name, scripts, suffix)
    for completion_file in files:
        outcome = install_completion(completion_file, completion_dir, dry_run=dry_run)
        _report(completion_script_name(completion_file, shell_name), outcome, dry_run)

    if (repo / completions_dir).is_dir() and not files and scripts:
        click.echo(f"   {click.style('ℹ️ ', dim=True)} No completions found for installed scripts")

    if shell_name == "fish" and not dry_run:
        click.echo()
        click.echo(f"   {click.style('💡', fg='yellow')} Run "
                   f"{click.style('source ~/.config/fish/config.fish', fg='cyan')} to reload completions")

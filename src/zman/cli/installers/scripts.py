"""
Script discovery and symlink installation.

Scripts are executable files ending in the configured suffix. Each one is
linked into the bin directory under its name without the suffix, so
``z.py`` becomes ``~/bin/z``.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from zman.cli.installers.common import InstallError, InstallOutcome, is_executable

logger = logging.getLogger(__name__)


def link_name(script: Path, suffix: str) -> str:
    """Return the name a script is linked under (its file name minus *suffix*)."""
    name = script.name
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def _resolve_named_script(repo_dir: Path, name: str, suffix: str) -> Path:
    with_suffix = repo_dir / f"{name}{suffix}"
    as_given = repo_dir / name

    if with_suffix.exists():
        path = with_suffix
    elif as_given.exists() and suffix and as_given.name.endswith(suffix):
        path = as_given
    else:
        raise InstallError(
            f"Script '{name}' not found in {repo_dir} (looked for {name}{suffix})"
        )

    if not path.is_file():
        raise InstallError(f"'{path}' is not a file")
    if not is_executable(path):
        raise InstallError(f"'{path}' is not executable")
    return path


def find_scripts(
    repo_dir: Path,
    names: Sequence[str] | None = None,
    suffix: str = ".py",
    script_dirs: Sequence[str] = (".", "meta"),
) -> list[Path]:
    """Find installable scripts.

    Args:
        repo_dir: Repository root.
        names: Specific script names (with or without *suffix*). When empty,
            every executable ``*<suffix>`` file in *script_dirs* is used.
        suffix: Script file suffix.
        script_dirs: Directories, relative to *repo_dir*, to scan.

    Returns:
        Script paths; sorted when discovered, in request order when named.

    Raises:
        InstallError: If a named script is missing, not a file or not executable.
    """
    if names:
        return [_resolve_named_script(repo_dir, name, suffix) for name in names]

    scripts: list[Path] = []
    for directory in script_dirs:
        scan_dir = repo_dir / directory
        if not scan_dir.is_dir():
            continue
        for path in scan_dir.iterdir():
            if path.is_file() and path.name.endswith(suffix) and is_executable(path):
                scripts.append(path)
    scripts.sort()
    return scripts


def _points_to(link_path: Path, expected: Path) -> bool:
    """Check whether the symlink at *link_path* resolves to *expected*."""
    try:
        target = Path(os.readlink(link_path))
        if not target.is_absolute():
            target = link_path.parent / target
        return target.resolve(strict=True) == expected.resolve(strict=True)
    except OSError:
        return False


def install_script(
    script: Path,
    bin_dir: Path,
    suffix: str = ".py",
    force: bool = False,
    dry_run: bool = False,
) -> InstallOutcome:
    """Symlink *script* into *bin_dir*.

    A correct existing link is left alone; a broken or misdirected one is
    replaced. A regular file in the way is only replaced with *force*.

    Raises:
        InstallError: If a regular file occupies the link path and *force* is off.
    """
    link_path = bin_dir / link_name(script, suffix)
    replacing = False

    if link_path.is_symlink():
        if _points_to(link_path, script):
            return InstallOutcome.ALREADY_INSTALLED
        replacing = True
    elif link_path.exists():
        if not force:
            raise InstallError(
                f"Regular file exists at {link_path}. Cannot create symlink. "
                "Use --force to overwrite."
            )
        replacing = True

    if dry_run:
        return InstallOutcome.PLANNED

    if replacing:
        link_path.unlink()
    try:
        os.symlink(script.resolve(), link_path)
    except OSError as e:
        raise InstallError(f"Failed to create symlink from {link_path} to {script}: {e}") from e

    logger.info(f"Linked {link_path} -> {script}")
    return InstallOutcome.UPDATED if replacing else InstallOutcome.INSTALLED

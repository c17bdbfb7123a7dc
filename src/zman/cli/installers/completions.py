"""
Shell detection and completion file installation.

Completion files live in the repository as ``<script>.<shell>`` and are
copied into the directory each shell searches.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from shutil import copy2

from zman.cli.installers.common import InstallError, InstallOutcome
from zman.cli.installers.scripts import link_name

logger = logging.getLogger(__name__)

SUPPORTED_SHELLS = ("fish", "bash", "zsh")


def detect_shell() -> str | None:
    """Return the basename of ``$SHELL``, e.g. ``"fish"``."""
    shell_path = os.environ.get("SHELL")
    if not shell_path:
        return None
    return Path(shell_path).name or None


def _data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def get_completion_dir(shell: str) -> Path | None:
    """Return where *shell* looks for user completions, or None if unknown."""
    if shell == "fish":
        return Path.home() / ".config" / "fish" / "completions"
    if shell == "bash":
        return _data_dir() / "bash-completion" / "completions"
    if shell == "zsh":
        return _data_dir() / "zsh" / "site-functions"
    return None


def completion_script_name(completion_file: Path, shell: str) -> str:
    """``z.fish`` -> ``z``."""
    name = completion_file.name
    ending = f".{shell}"
    return name[: -len(ending)] if name.endswith(ending) else name


def completion_files_for(
    completions_dir: Path,
    shell: str,
    scripts: Sequence[Path],
    suffix: str = ".py",
) -> list[Path]:
    """Return completion files for *shell* that belong to one of *scripts*."""
    if not completions_dir.is_dir():
        return []

    script_names = {link_name(script, suffix) for script in scripts}
    files = []
    for path in sorted(completions_dir.iterdir()):
        if not path.is_file() or not path.name.endswith(f".{shell}"):
            continue
        if completion_script_name(path, shell) in script_names:
            files.append(path)
    return files


def install_completion(
    completion_file: Path,
    completion_dir: Path,
    dry_run: bool = False,
) -> InstallOutcome:
    """Copy *completion_file* into *completion_dir* unless an identical copy exists.

    In a dry run any existing file counts as installed.

    Raises:
        InstallError: If the directory cannot be created or the copy fails.
    """
    target_path = completion_dir / completion_file.name

    if target_path.exists():
        if dry_run:
            return InstallOutcome.ALREADY_INSTALLED
        if target_path.read_bytes() == completion_file.read_bytes():
            return InstallOutcome.ALREADY_INSTALLED

    if dry_run:
        return InstallOutcome.PLANNED

    try:
        completion_dir.mkdir(parents=True, exist_ok=True)
        copy2(completion_file, target_path)
    except OSError as e:
        raise InstallError(f"Failed to copy {completion_file} to {target_path}: {e}") from e

    logger.info(f"Installed completion {target_path}")
    return InstallOutcome.INSTALLED

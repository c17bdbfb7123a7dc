"""Types and path helpers shared by the script and completion installers."""

import os
from enum import Enum
from pathlib import Path

from zman.zellij.errors import ZmanError


class InstallError(ZmanError):
    """Raised when a script or completion cannot be installed."""


class InstallOutcome(str, Enum):
    """What happened to one installed item."""

    INSTALLED = "installed"
    UPDATED = "updated"
    ALREADY_INSTALLED = "already_installed"
    PLANNED = "planned"


def expand_tilde(path: str) -> Path:
    """Expand a leading ``~/`` to the user's home directory."""
    if path.startswith("~/"):
        return Path.home() / path[2:]
    return Path(path)


def is_executable(path: Path) -> bool:
    return os.stat(path).st_mode & 0o111 != 0


def is_on_path(directory: Path, path_var: str | None = None) -> bool:
    """Check whether *directory* is an entry of ``$PATH`` (or *path_var*)."""
    if path_var is None:
        path_var = os.environ.get("PATH", "")
    return str(directory) in path_var.split(os.pathsep)

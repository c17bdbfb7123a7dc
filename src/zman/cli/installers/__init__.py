"""
Installers for scripts and their shell completions.
"""

from zman.cli.installers.common import (
    InstallError,
    InstallOutcome,
    expand_tilde,
    is_executable,
    is_on_path,
)
from zman.cli.installers.completions import (
    SUPPORTED_SHELLS,
    completion_files_for,
    completion_script_name,
    detect_shell,
    get_completion_dir,
    install_completion,
)
from zman.cli.installers.scripts import find_scripts, install_script, link_name

__all__ = [
    "InstallError",
    "InstallOutcome",
    "SUPPORTED_SHELLS",
    "completion_files_for",
    "completion_script_name",
    "detect_shell",
    "expand_tilde",
    "find_scripts",
    "get_completion_dir",
    "install_completion",
    "install_script",
    "is_executable",
    "is_on_path",
    "link_name",
]

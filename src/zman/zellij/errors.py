"""Custom exceptions for the zellij module."""

from __future__ import annotations

import platform


def _install_hint() -> str:
    """Return platform-specific zellij install instructions."""
    system = platform.system()
    if system == "Darwin":
        return "Install with: brew install zellij"
    else:
        return "Install with: cargo install --locked zellij  (or your package manager)"


class ZmanError(RuntimeError):
    """Base class for every error raised by zman."""


class ZellijNotFoundError(ZmanError):
    """Raised when the zellij binary is not installed or not on PATH."""

    def __init__(self, command: str = "zellij") -> None:
        hint = _install_hint()
        super().__init__(f"zellij binary '{command}' not found. {hint}")
        self.command = command


class ListingUnavailableError(ZmanError):
    """Raised when ``zellij list-sessions`` cannot be run. Fatal."""


class LayoutUnavailableError(ZmanError):
    """Raised when a single session's layout could not be fetched."""

    def __init__(self, message: str, session_name: str) -> None:
        super().__init__(f"session '{session_name}': {message}")
        self.session_name = session_name


class LayoutParseError(ZmanError):
    """Raised when a layout document is not valid KDL."""


class SessionNotFoundError(ZmanError):
    """Raised when a name or hash prefix matches no known session."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No session found matching '{query}' (name or hash prefix)")
        self.query = query


class ZellijCommandError(ZmanError):
    """Raised when a zellij session operation fails (create, kill, rename, delete)."""

    def __init__(self, message: str, session_name: str | None = None) -> None:
        prefix = f"zellij session '{session_name}': " if session_name else "zellij: "
        super().__init__(f"{prefix}{message}")
        self.session_name = session_name

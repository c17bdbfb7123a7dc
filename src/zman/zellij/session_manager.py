"""Zellij session lifecycle management.

Wraps the ``zellij`` CLI: lists, creates, attaches to, switches between,
kills, renames and deletes sessions, and fetches layouts for tab summaries.
Captured calls (listing, layouts) return text; interactive calls (attach,
foreground create) inherit the terminal.
"""

from __future__ import annotations

import asyncio
import logging
import platform
import shutil
import subprocess
from pathlib import Path

from zman.config.app import ZellijSettings
from zman.zellij.errors import (
    LayoutUnavailableError,
    ListingUnavailableError,
    ZellijCommandError,
    ZellijNotFoundError,
)
from zman.zellij.listing import get_current_session, parse_session_listing
from zman.zellij.models import SessionRecord

logger = logging.getLogger(__name__)

CACHED_LAYOUT_FILE = "session-layout.kdl"
NO_SESSIONS_MESSAGE = "No active zellij sessions found"


def default_cache_base() -> Path:
    """Return the directory zellij keeps its per-version cache in."""
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Caches" / "org.Zellij-Contributors.Zellij"
    return Path.home() / ".cache" / "zellij"


class ZellijSessionManager:
    """Runs zellij commands on behalf of the CLI."""

    def __init__(self, config: ZellijSettings | None = None) -> None:
        self._config = config or ZellijSettings()

    @property
    def config(self) -> ZellijSettings:
        return self._config

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _base_args(self) -> list[str]:
        return [self._config.command]

    def _run_sync(self, *zellij_args: str) -> subprocess.CompletedProcess[str]:
        """Run a zellij subcommand and capture its output.

        Raises:
            ZellijNotFoundError: If the binary cannot be executed.
        """
        cmd = [*self._base_args(), *zellij_args]
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._config.timeout,
            )
        except FileNotFoundError as e:
            raise ZellijNotFoundError(self._config.command) from e

    def _exec(self, *zellij_args: str) -> int:
        """Run a zellij subcommand attached to the current terminal."""
        cmd = [*self._base_args(), *zellij_args]
        try:
            return subprocess.run(cmd).returncode
        except FileNotFoundError as e:
            raise ZellijNotFoundError(self._config.command) from e

    async def _run(
        self,
        *zellij_args: str,
        timeout: float | None = None,
    ) -> tuple[int, str, str]:
        """Run a zellij subcommand asynchronously and return (returncode, stdout, stderr)."""
        cmd = [*self._base_args(), *zellij_args]
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=timeout or self._config.timeout
            )
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise
        return (
            proc.returncode or 0,
            (stdout_bytes or b"").decode(errors="replace"),
            (stderr_bytes or b"").decode(errors="replace"),
        )

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def is_available(self) -> bool:
        """Check whether the zellij binary is on PATH."""
        return shutil.which(self._config.command) is not None

    def require_available(self) -> None:
        """Raise :class:`ZellijNotFoundError` if zellij is missing."""
        if not self.is_available():
            raise ZellijNotFoundError(self._config.command)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_sessions(self, include_exited: bool = False) -> tuple[SessionRecord, ...]:
        """Read the session listing once and return immutable records.

        Raises:
            ListingUnavailableError: If ``zellij list-sessions`` cannot be run.
        """
        try:
            result = self._run_sync("list-sessions")
        except (ZellijNotFoundError, subprocess.TimeoutExpired, OSError) as e:
            raise ListingUnavailableError(f"Failed to list zellij sessions: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            # zellij exits 1 with this message when nothing is running
            if NO_SESSIONS_MESSAGE in f"{result.stdout}{stderr}":
                return ()
            raise ListingUnavailableError(
                f"Failed to list zellij sessions (rc={result.returncode}): {stderr}"
            )

        sessions = parse_session_listing(
            result.stdout,
            include_exited=include_exited,
            current_session=get_current_session(),
        )
        logger.debug(f"Listed {len(sessions)} zellij sessions (include_exited={include_exited})")
        return sessions

    def find_exited_session(self, name: str) -> SessionRecord | None:
        """Return the exited session called *name*, if zellij still remembers it."""
        for session in self.list_sessions(include_exited=True):
            if session.name == name and session.is_exited:
                return session
        return None

    def is_live(self, name: str) -> bool:
        """Check whether a non-exited session called *name* exists."""
        return any(s.name == name and not s.is_exited for s in self.list_sessions())

    # ------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------

    def get_version(self) -> str:
        """Return the zellij version, e.g. ``"0.42.2"`` from ``zellij 0.42.2``."""
        try:
            result = self._run_sync("--version")
        except (subprocess.TimeoutExpired, OSError) as e:
            raise ZellijCommandError(f"Failed to get zellij version: {e}") from e
        if result.returncode != 0:
            raise ZellijCommandError("Failed to get zellij version")

        parts = result.stdout.split()
        if len(parts) < 2:
            raise ZellijCommandError(f"Failed to parse zellij version: {result.stdout.strip()!r}")
        return parts[1]

    def get_cache_dir(self) -> Path:
        """Return the versioned zellij cache directory."""
        if self._config.cache_dir:
            base = Path(self._config.cache_dir).expanduser()
        else:
            base = default_cache_base()
        return base / self.get_version()

    def cached_layout_path(self, session_name: str) -> Path:
        """Return where zellij caches the layout of *session_name*."""
        return self.get_cache_dir() / "session_info" / session_name / CACHED_LAYOUT_FILE

    def load_cached_layout(self, session_name: str) -> str | None:
        """Read the layout zellij cached for an exited session.

        Returns:
            The KDL text, or ``None`` when no cached layout exists.

        Raises:
            LayoutUnavailableError: If the cache location or file cannot be read.
        """
        try:
            layout_path = self.cached_layout_path(session_name)
        except ZellijCommandError as e:
            raise LayoutUnavailableError(str(e), session_name) from e

        if not layout_path.exists():
            logger.debug(f"No cached layout for '{session_name}' at {layout_path}")
            return None
        try:
            return layout_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LayoutUnavailableError(
                f"Failed to read cached layout from {layout_path}: {e}", session_name
            ) from e

    async def dump_layout(self, session_name: str) -> str:
        """Return the live layout of *session_name* as KDL.

        Raises:
            LayoutUnavailableError: If the layout cannot be dumped.
        """
        try:
            rc, stdout, _stderr = await self._run("-s", session_name, "action", "dump-layout")
        except TimeoutError as e:
            raise LayoutUnavailableError("Timed out dumping layout", session_name) from e
        except OSError as e:
            raise LayoutUnavailableError(f"Failed to dump layout: {e}", session_name) from e
        if rc != 0:
            raise LayoutUnavailableError(f"Failed to dump layout (rc={rc})", session_name)
        return stdout

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self, name: str) -> bool:
        """Attach the terminal to *name*. Returns True when zellij exits cleanly."""
        rc = self._exec("attach", name)
        if rc != 0:
            logger.debug(f"zellij attach '{name}' exited with rc={rc}")
        return rc == 0

    def switch(self, name: str) -> None:
        """Switch the current zellij client to *name*."""
        rc = self._exec("action", "switch-session", name)
        if rc != 0:
            raise ZellijCommandError(f"Failed to switch session (rc={rc})", session_name=name)

    def create_session(self, name: str, detached: bool = False) -> None:
        """Create a session, in the background when *detached*, else attached."""
        if detached:
            try:
                rc = self._run_sync("attach", "--create-background", name).returncode
            except subprocess.TimeoutExpired as e:
                raise ZellijCommandError("Timed out creating session", session_name=name) from e
        else:
            rc = self._exec("-s", name)
        if rc != 0:
            raise ZellijCommandError(f"Failed to create session (rc={rc})", session_name=name)
        logger.info(f"Created zellij session '{name}' (detached={detached})")

    def kill_session(self, name: str) -> None:
        rc = self._exec("kill-session", name)
        if rc != 0:
            raise ZellijCommandError(f"Failed to kill session (rc={rc})", session_name=name)
        logger.info(f"Killed zellij session '{name}'")

    def delete_session(self, name: str) -> None:
        rc = self._exec("delete-session", name)
        if rc != 0:
            raise ZellijCommandError(f"Failed to delete session (rc={rc})", session_name=name)
        logger.info(f"Deleted zellij session '{name}'")

    def rename_session(self, old_name: str, new_name: str, in_current: bool = False) -> None:
        """Rename a session.

        Inside the session being renamed zellij only accepts the ``action``
        form; from anywhere else the top-level subcommand is used.
        """
        if in_current:
            rc = self._exec("action", "rename-session", new_name)
        else:
            rc = self._exec("rename-session", old_name, new_name)
        if rc != 0:
            raise ZellijCommandError(f"Failed to rename session (rc={rc})", session_name=old_name)
        logger.info(f"Renamed zellij session '{old_name}' to '{new_name}'")

"""Unit tests for ZellijSessionManager.

All zellij subprocess calls are mocked; no real zellij binary required.
"""

import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from zman.config.app import ZellijSettings
from zman.zellij.errors import (
    LayoutUnavailableError,
    ListingUnavailableError,
    ZellijCommandError,
    ZellijNotFoundError,
)
from zman.zellij.session_manager import ZellijSessionManager, default_cache_base

pytestmark = pytest.mark.unit

RUN = "zman.zellij.session_manager.subprocess.run"

LISTING = (
    "\x1b[32;1mmain\x1b[m [Created \x1b[35;1m1h\x1b[m ago]\n"
    "\x1b[32;1mold\x1b[m [Created \x1b[35;1m2days\x1b[m ago] "
    "(\x1b[31;1mEXITED\x1b[m - attach to resurrect)\n"
)


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestZellijErrors:
    """Tests for error messages."""

    def test_not_found_has_install_hint(self) -> None:
        err = ZellijNotFoundError("/opt/zellij")
        assert "/opt/zellij" in str(err)
        assert "Install" in str(err)
        assert err.command == "/opt/zellij"

    def test_command_error_with_name(self) -> None:
        err = ZellijCommandError("boom", session_name="main")
        assert str(err) == "zellij session 'main': boom"

    def test_command_error_without_name(self) -> None:
        assert str(ZellijCommandError("boom")) == "zellij: boom"

    def test_layout_unavailable_keeps_name(self) -> None:
        err = LayoutUnavailableError("gone", "main")
        assert err.session_name == "main"
        assert "main" in str(err)


class TestAvailability:
    """Tests for is_available() and require_available()."""

    def test_base_args_default(self) -> None:
        assert ZellijSessionManager()._base_args() == ["zellij"]

    def test_base_args_custom_command(self) -> None:
        mgr = ZellijSessionManager(ZellijSettings(command="/usr/local/bin/zellij"))
        assert mgr._base_args() == ["/usr/local/bin/zellij"]

    @patch("shutil.which", return_value="/usr/bin/zellij")
    def test_is_available_true(self, mock_which) -> None:
        assert ZellijSessionManager().is_available() is True

    @patch("shutil.which", return_value=None)
    def test_require_available_raises(self, mock_which) -> None:
        with pytest.raises(ZellijNotFoundError):
            ZellijSessionManager().require_available()


class TestListSessions:
    """Tests for list_sessions()."""

    def test_live_only(self) -> None:
        with patch(RUN, return_value=_completed(stdout=LISTING)) as mock_run:
            sessions = ZellijSessionManager().list_sessions()

        assert [s.name for s in sessions] == ["main"]
        assert mock_run.call_args.args[0] == ["zellij", "list-sessions"]

    def test_include_exited(self) -> None:
        with patch(RUN, return_value=_completed(stdout=LISTING)):
            sessions = ZellijSessionManager().list_sessions(include_exited=True)

        assert [(s.name, s.is_exited) for s in sessions] == [("main", False), ("old", True)]

    def test_current_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ZELLIJ_SESSION_NAME", "main")
        with patch(RUN, return_value=_completed(stdout=LISTING)):
            sessions = ZellijSessionManager().list_sessions()
        assert sessions[0].is_current is True

    def test_no_sessions_message_is_empty(self) -> None:
        with patch(RUN, return_value=_completed(1, stderr="No active zellij sessions found.")):
            assert ZellijSessionManager().list_sessions() == ()

    def test_failure_is_fatal(self) -> None:
        with patch(RUN, return_value=_completed(2, stderr="boom")):
            with pytest.raises(ListingUnavailableError, match="boom"):
                ZellijSessionManager().list_sessions()

    def test_missing_binary_is_fatal(self) -> None:
        with patch(RUN, side_effect=FileNotFoundError("zellij")):
            with pytest.raises(ListingUnavailableError, match="not found"):
                ZellijSessionManager().list_sessions()

    def test_timeout_is_fatal(self) -> None:
        with patch(RUN, side_effect=subprocess.TimeoutExpired(cmd="zellij", timeout=10)):
            with pytest.raises(ListingUnavailableError):
                ZellijSessionManager().list_sessions()

    def test_undecodable_output(self, temp_dir: Path) -> None:
        fake = temp_dir / "zellij"
        fake.write_text("#!/bin/sh\nprintf 'ok [Created]\\n\\377bad [Created]\\n'\n")
        fake.chmod(0o755)

        sessions = ZellijSessionManager(ZellijSettings(command=str(fake))).list_sessions()

        assert [s.name for s in sessions] == ["ok", "\ufffdbad"]

    def test_find_exited_session(self) -> None:
        with patch(RUN, return_value=_completed(stdout=LISTING)):
            mgr = ZellijSessionManager()
            assert mgr.find_exited_session("old").name == "old"
            assert mgr.find_exited_session("main") is None
            assert mgr.find_exited_session("missing") is None

    def test_is_live(self) -> None:
        with patch(RUN, return_value=_completed(stdout=LISTING)):
            mgr = ZellijSessionManager()
            assert mgr.is_live("main") is True
            assert mgr.is_live("old") is False


class TestLayouts:
    """Tests for version, cache and layout retrieval."""

    def test_get_version(self) -> None:
        with patch(RUN, return_value=_completed(stdout="zellij 0.42.2\n")):
            assert ZellijSessionManager().get_version() == "0.42.2"

    def test_get_version_unparseable(self) -> None:
        with patch(RUN, return_value=_completed(stdout="zellij\n")):
            with pytest.raises(ZellijCommandError, match="parse"):
                ZellijSessionManager().get_version()

    def test_get_version_failure(self) -> None:
        with patch(RUN, return_value=_completed(1)):
            with pytest.raises(ZellijCommandError):
                ZellijSessionManager().get_version()

    def test_default_cache_base_linux(self) -> None:
        with patch("zman.zellij.session_manager.platform.system", return_value="Linux"):
            assert default_cache_base() == Path.home() / ".cache" / "zellij"

    def test_default_cache_base_macos(self) -> None:
        with patch("zman.zellij.session_manager.platform.system", return_value="Darwin"):
            assert default_cache_base() == (
                Path.home() / "Library" / "Caches" / "org.Zellij-Contributors.Zellij"
            )

    def test_get_cache_dir_uses_config(self, temp_dir: Path) -> None:
        mgr = ZellijSessionManager(ZellijSettings(cache_dir=str(temp_dir)))
        with patch.object(mgr, "get_version", return_value="0.42.2"):
            assert mgr.get_cache_dir() == temp_dir / "0.42.2"

    def test_load_cached_layout(self, temp_dir: Path) -> None:
        layout_dir = temp_dir / "0.42.2" / "session_info" / "old"
        layout_dir.mkdir(parents=True)
        (layout_dir / "session-layout.kdl").write_text("layout {\n}\n")

        mgr = ZellijSessionManager(ZellijSettings(cache_dir=str(temp_dir)))
        with patch.object(mgr, "get_version", return_value="0.42.2"):
            assert mgr.load_cached_layout("old") == "layout {\n}\n"

    def test_load_cached_layout_undecodable(self, temp_dir: Path) -> None:
        layout_dir = temp_dir / "0.42.2" / "session_info" / "old"
        layout_dir.mkdir(parents=True)
        (layout_dir / "session-layout.kdl").write_bytes(b'layout { tab name="\xff\xfe" }')

        mgr = ZellijSessionManager(ZellijSettings(cache_dir=str(temp_dir)))
        with patch.object(mgr, "get_version", return_value="0.42.2"):
            with pytest.raises(LayoutUnavailableError, match="Failed to read cached layout"):
                mgr.load_cached_layout("old")

    def test_load_cached_layout_missing(self, temp_dir: Path) -> None:
        mgr = ZellijSessionManager(ZellijSettings(cache_dir=str(temp_dir)))
        with patch.object(mgr, "get_version", return_value="0.42.2"):
            assert mgr.load_cached_layout("ghost") is None

    def test_load_cached_layout_without_version(self) -> None:
        mgr = ZellijSessionManager()
        with patch.object(mgr, "get_version", side_effect=ZellijCommandError("no version")):
            with pytest.raises(LayoutUnavailableError):
                mgr.load_cached_layout("old")

    @pytest.mark.asyncio
    async def test_dump_layout(self) -> None:
        mgr = ZellijSessionManager()
        with patch.object(mgr, "_run", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (0, "layout {\n}\n", "")
            assert await mgr.dump_layout("main") == "layout {\n}\n"
            mock_run.assert_awaited_once_with("-s", "main", "action", "dump-layout")

    @pytest.mark.asyncio
    async def test_dump_layout_failure(self) -> None:
        mgr = ZellijSessionManager()
        with patch.object(mgr, "_run", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (1, "", "There is no active session!")
            with pytest.raises(LayoutUnavailableError) as exc_info:
                await mgr.dump_layout("main")
        assert exc_info.value.session_name == "main"

    @pytest.mark.asyncio
    async def test_dump_layout_timeout(self) -> None:
        mgr = ZellijSessionManager()
        with patch.object(mgr, "_run", new_callable=AsyncMock) as mock_run:
            mock_run.side_effect = TimeoutError()
            with pytest.raises(LayoutUnavailableError, match="Timed out"):
                await mgr.dump_layout("main")

    @pytest.mark.asyncio
    async def test_dump_layout_missing_binary(self) -> None:
        mgr = ZellijSessionManager()
        with patch.object(mgr, "_run", new_callable=AsyncMock) as mock_run:
            mock_run.side_effect = FileNotFoundError("zellij")
            with pytest.raises(LayoutUnavailableError):
                await mgr.dump_layout("main")


class TestLifecycle:
    """Tests for attach, switch, create, kill, delete and rename."""

    def test_attach(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            assert ZellijSessionManager().attach("main") is True
        mock_run.assert_called_once_with(["zellij", "attach", "main"])

    def test_attach_failure_returns_false(self) -> None:
        with patch(RUN, return_value=_completed(1)):
            assert ZellijSessionManager().attach("main") is False

    def test_attach_missing_binary(self) -> None:
        with patch(RUN, side_effect=FileNotFoundError("zellij")):
            with pytest.raises(ZellijNotFoundError):
                ZellijSessionManager().attach("main")

    def test_switch(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().switch("work")
        mock_run.assert_called_once_with(["zellij", "action", "switch-session", "work"])

    def test_switch_failure(self) -> None:
        with patch(RUN, return_value=_completed(1)):
            with pytest.raises(ZellijCommandError, match="switch"):
                ZellijSessionManager().switch("work")

    def test_create_attached(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().create_session("new")
        mock_run.assert_called_once_with(["zellij", "-s", "new"])

    def test_create_detached(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().create_session("new", detached=True)
        assert mock_run.call_args.args[0] == ["zellij", "attach", "--create-background", "new"]

    def test_create_failure(self) -> None:
        with patch(RUN, return_value=_completed(1)):
            with pytest.raises(ZellijCommandError, match="create"):
                ZellijSessionManager().create_session("new", detached=True)

    def test_kill(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().kill_session("work")
        mock_run.assert_called_once_with(["zellij", "kill-session", "work"])

    def test_kill_failure(self) -> None:
        with patch(RUN, return_value=_completed(1)):
            with pytest.raises(ZellijCommandError, match="kill"):
                ZellijSessionManager().kill_session("work")

    def test_delete(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().delete_session("old")
        mock_run.assert_called_once_with(["zellij", "delete-session", "old"])

    def test_rename_outside(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().rename_session("old", "new")
        mock_run.assert_called_once_with(["zellij", "rename-session", "old", "new"])

    def test_rename_current(self) -> None:
        with patch(RUN, return_value=_completed(0)) as mock_run:
            ZellijSessionManager().rename_session("old", "new", in_current=True)
        mock_run.assert_called_once_with(["zellij", "action", "rename-session", "new"])

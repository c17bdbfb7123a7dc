"""Pytest configuration and shared fixtures for zman tests."""

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from zman.config.app import AppConfig
from zman.zellij.identity import digest
from zman.zellij.models import SessionRecord


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's zellij session and zman config."""
    monkeypatch.delenv("ZELLIJ_SESSION_NAME", raising=False)
    monkeypatch.setenv("ZMAN_HOME", str(tmp_path / ".zman"))


@pytest.fixture
def default_config() -> AppConfig:
    """Create a default AppConfig for testing."""
    return AppConfig()


@pytest.fixture
def make_session() -> Callable[..., SessionRecord]:
    """Factory for session records carrying their real digest."""

    def _make(name: str, is_current: bool = False, is_exited: bool = False) -> SessionRecord:
        return SessionRecord(
            name=name,
            is_current=is_current,
            is_exited=is_exited,
            hash_prefix=digest(name),
        )

    return _make


@pytest.fixture
def sample_sessions(make_session: Callable[..., SessionRecord]) -> tuple[SessionRecord, ...]:
    """Current, plain and exited sessions, in listing order."""
    return (
        make_session("main", is_current=True),
        make_session("work"),
        make_session("old", is_exited=True),
    )

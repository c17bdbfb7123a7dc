"""Value records shared by the zellij modules.

All records are frozen: a listing is read once per command and the same
records are then shared, read-only, by every concurrent tab fetch.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_TAB_NAME = "Tab"


@dataclass(frozen=True)
class SessionRecord:
    """One zellij session as reported by ``zellij list-sessions``."""

    name: str
    is_current: bool = False
    is_exited: bool = False
    hash_prefix: str = ""


@dataclass(frozen=True)
class TabSummary:
    """One row of a session's tab summary."""

    name: str = DEFAULT_TAB_NAME
    command: str | None = None
    cwd: str | None = None


@dataclass(frozen=True)
class SessionTabs:
    """Tab fetch result for one session, ready for rendering."""

    session: SessionRecord
    prefix: str
    tabs: tuple[TabSummary, ...] = field(default_factory=tuple)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

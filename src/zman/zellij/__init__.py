"""Zellij session identification, listing and tab summaries.

Public API::

    from zman.zellij import (
        ZellijSessionManager,
        fetch_all,
        parse_layout,
        shortest_unique_prefixes,
    )
"""

from __future__ import annotations

from zman.zellij.errors import (
    LayoutParseError,
    LayoutUnavailableError,
    ListingUnavailableError,
    SessionNotFoundError,
    ZellijCommandError,
    ZellijNotFoundError,
    ZmanError,
)
from zman.zellij.identity import digest, find_session, require_session, shortest_unique_prefixes
from zman.zellij.layout import parse_layout
from zman.zellij.listing import extract_session_name, get_current_session, parse_session_listing
from zman.zellij.models import SessionRecord, SessionTabs, TabSummary
from zman.zellij.session_manager import ZellijSessionManager
from zman.zellij.tabs import fetch_all, fetch_session_tabs

__all__ = [
    "LayoutParseError",
    "LayoutUnavailableError",
    "ListingUnavailableError",
    "SessionNotFoundError",
    "SessionRecord",
    "SessionTabs",
    "TabSummary",
    "ZellijCommandError",
    "ZellijNotFoundError",
    "ZellijSessionManager",
    "ZmanError",
    "digest",
    "extract_session_name",
    "fetch_all",
    "fetch_session_tabs",
    "find_session",
    "get_current_session",
    "parse_layout",
    "parse_session_listing",
    "require_session",
    "shortest_unique_prefixes",
]

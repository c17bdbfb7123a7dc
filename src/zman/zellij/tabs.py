"""Concurrent tab-summary fetching for a session listing.

Every session gets its own fetch-and-parse task. A failing session keeps
its slot in the result with the error attached; it never cancels or
reorders its siblings.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence

from zman.zellij.errors import ZmanError
from zman.zellij.identity import shortest_unique_prefixes
from zman.zellij.layout import parse_layout
from zman.zellij.models import SessionRecord, SessionTabs, TabSummary
from zman.zellij.session_manager import ZellijSessionManager

logger = logging.getLogger(__name__)


async def fetch_session_tabs(
    manager: ZellijSessionManager,
    session: SessionRecord,
) -> tuple[TabSummary, ...]:
    """Fetch and parse the layout of one session.

    Live sessions are asked for their current layout; exited sessions use
    the layout zellij cached when they ended. A missing cache entry is not
    an error and yields no tabs.

    Raises:
        LayoutUnavailableError: If the layout cannot be obtained.
        LayoutParseError: If the layout is not valid KDL.
    """
    if session.is_exited:
        # Cache reads are blocking file I/O
        layout = await asyncio.to_thread(manager.load_cached_layout, session.name)
        if layout is None:
            return ()
    else:
        layout = await manager.dump_layout(session.name)
    return parse_layout(layout)


async def fetch_all(
    manager: ZellijSessionManager,
    sessions: Sequence[SessionRecord],
    max_workers: int | None = None,
) -> list[SessionTabs]:
    """Fetch tab summaries for every session concurrently.

    Args:
        manager: Session manager used to obtain layouts.
        sessions: Snapshot of sessions, in listing order.
        max_workers: Upper bound on concurrent fetches (default: CPU count).

    Returns:
        One :class:`SessionTabs` per session, in the order of *sessions*.
    """
    prefixes = shortest_unique_prefixes(sessions)
    limit = max_workers or manager.config.max_workers or os.cpu_count() or 1
    semaphore = asyncio.Semaphore(limit)

    async def _fetch_one(session: SessionRecord) -> SessionTabs:
        prefix = prefixes[session.name]
        async with semaphore:
            try:
                tabs = await fetch_session_tabs(manager, session)
            except ZmanError as e:
                logger.debug(f"Unable to fetch tabs for '{session.name}': {e}")
                return SessionTabs(session=session, prefix=prefix, error=e)
        return SessionTabs(session=session, prefix=prefix, tabs=tabs)

    return list(await asyncio.gather(*(_fetch_one(s) for s in sessions)))

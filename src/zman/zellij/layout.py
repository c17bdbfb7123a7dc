"""Reconstruct per-tab summaries from a zellij KDL layout.

Both ``zellij action dump-layout`` and the cached ``session-layout.kdl`` of
an exited session look roughly like::

    layout {
        tab name="editor" focus=true {
            pane size=1 borderless=true {
                plugin location="zellij:tab-bar"
            }
            pane command="nvim" cwd="/home/me/src"
            pane cwd="/home/me/src"
        }
    }

Only direct ``tab`` children of the ``layout`` node and direct ``pane``
children of each tab are inspected.
"""

from __future__ import annotations

import logging
from typing import Any

import kdl

from zman.zellij.errors import LayoutParseError
from zman.zellij.models import DEFAULT_TAB_NAME, TabSummary

logger = logging.getLogger(__name__)


def _string_prop(node: Any, key: str) -> str | None:
    """Return property *key* of a KDL node if it holds a string."""
    value = node.props.get(key)
    if isinstance(value, str):
        return value
    # Tagged or non-native values are wrapped in kdl value objects.
    inner = getattr(value, "value", None)
    if isinstance(inner, str):
        return inner
    return None


def _summarize_tab(tab: Any) -> list[TabSummary]:
    tab_name = _string_prop(tab, "name") or DEFAULT_TAB_NAME

    seen: set[tuple[str | None, str | None]] = set()
    summaries: list[TabSummary] = []
    for child in tab.nodes:
        if child.name != "pane":
            continue
        command = _string_prop(child, "command")
        cwd = _string_prop(child, "cwd")
        # Plugin panes carry neither
        if command is None and cwd is None:
            continue
        key = (command, cwd)
        if key in seen:
            continue
        seen.add(key)
        summaries.append(TabSummary(name=tab_name, command=command, cwd=cwd))

    if not summaries:
        summaries.append(TabSummary(name=tab_name))
    return summaries


def parse_layout(raw: str) -> tuple[TabSummary, ...]:
    """Parse a KDL layout into tab summaries, in declared tab order.

    Args:
        raw: KDL layout text.

    Returns:
        One :class:`TabSummary` per distinct ``(command, cwd)`` pane pair
        of each tab, or a single empty summary for tabs without such
        panes. An empty tuple when there is no ``layout`` node.

    Raises:
        LayoutParseError: If *raw* is not valid KDL.
    """
    try:
        document = kdl.parse(raw)
    except (kdl.ParseError, ValueError, OverflowError) as e:
        raise LayoutParseError(f"Failed to parse KDL layout: {e}") from e

    layout = next((node for node in document.nodes if node.name == "layout"), None)
    if layout is None:
        logger.debug("Layout document has no 'layout' node")
        return ()

    tabs: list[TabSummary] = []
    for node in layout.nodes:
        if node.name == "tab":
            tabs.extend(_summarize_tab(node))
    return tuple(tabs)

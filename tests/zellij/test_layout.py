"""Tests for KDL layout parsing into tab summaries."""

import pytest

from zman.zellij.errors import LayoutParseError
from zman.zellij.layout import parse_layout
from zman.zellij.models import DEFAULT_TAB_NAME, TabSummary

pytestmark = pytest.mark.unit

DUMPED_LAYOUT = """
layout {
    cwd "/home/me"
    tab name="editor" focus=true hide_floating_panes=true {
        pane size=1 borderless=true {
            plugin location="zellij:tab-bar"
        }
        pane command="nvim" cwd="/home/me/src" {
            args "main.py"
        }
        pane cwd="/home/me/src"
        pane size=2 borderless=true {
            plugin location="zellij:status-bar"
        }
    }
    tab name="logs" {
        pane command="tail" cwd="/var/log"
    }
    new_tab_template {
        pane
    }
}
"""


class TestParseLayout:
    """Tests for parse_layout()."""

    def test_identical_panes_collapse(self) -> None:
        raw = """
        layout {
            tab name="editor" {
                pane command="vim" cwd="/src"
                pane command="vim" cwd="/src"
            }
        }
        """
        assert parse_layout(raw) == (TabSummary(name="editor", command="vim", cwd="/src"),)

    def test_tab_without_panes(self) -> None:
        raw = """
        layout {
            tab
        }
        """
        assert parse_layout(raw) == (TabSummary(name=DEFAULT_TAB_NAME, command=None, cwd=None),)
        assert DEFAULT_TAB_NAME == "Tab"

    def test_tab_with_only_plugin_panes(self) -> None:
        raw = """
        layout {
            tab name="bars" {
                pane size=1 borderless=true {
                    plugin location="zellij:tab-bar"
                }
            }
        }
        """
        assert parse_layout(raw) == (TabSummary(name="bars"),)

    def test_no_layout_node(self) -> None:
        raw = """
        keybinds {
            normal
        }
        """
        assert parse_layout(raw) == ()

    def test_empty_document(self) -> None:
        assert parse_layout("") == ()

    def test_layout_without_tabs(self) -> None:
        assert parse_layout("layout {\n    pane\n}\n") == ()

    def test_realistic_dump(self) -> None:
        assert parse_layout(DUMPED_LAYOUT) == (
            TabSummary(name="editor", command="nvim", cwd="/home/me/src"),
            TabSummary(name="editor", command=None, cwd="/home/me/src"),
            TabSummary(name="logs", command="tail", cwd="/var/log"),
        )

    def test_dedup_keeps_first_seen_order(self) -> None:
        raw = """
        layout {
            tab name="t" {
                pane command="b"
                pane command="a"
                pane command="b"
                pane cwd="/x"
                pane command="a"
            }
        }
        """
        assert [t.command for t in parse_layout(raw)] == ["b", "a", None]

    def test_dedup_does_not_cross_tabs(self) -> None:
        raw = """
        layout {
            tab name="one" {
                pane command="vim" cwd="/src"
            }
            tab name="two" {
                pane command="vim" cwd="/src"
            }
            tab name="one" {
                pane command="vim" cwd="/src"
            }
        }
        """
        assert [t.name for t in parse_layout(raw)] == ["one", "two", "one"]

    def test_only_direct_pane_children(self) -> None:
        raw = """
        layout {
            tab name="split" {
                pane split_direction="vertical" {
                    pane command="htop"
                }
            }
        }
        """
        assert parse_layout(raw) == (TabSummary(name="split"),)

    def test_non_string_name_uses_default(self) -> None:
        raw = """
        layout {
            tab name=3 {
                pane command="ls"
            }
        }
        """
        assert parse_layout(raw) == (TabSummary(name=DEFAULT_TAB_NAME, command="ls"),)

    def test_first_layout_node_only(self) -> None:
        raw = """
        layout {
            tab name="first"
        }
        layout {
            tab name="second"
        }
        """
        assert parse_layout(raw) == (TabSummary(name="first"),)

    def test_malformed_document(self) -> None:
        with pytest.raises(LayoutParseError, match="Failed to parse KDL layout"):
            parse_layout('layout {\n    tab name="unterminated\n')

    def test_out_of_range_number(self) -> None:
        with pytest.raises(LayoutParseError, match="Failed to parse KDL layout"):
            parse_layout("layout {\n    tab name=1e999\n}\n")

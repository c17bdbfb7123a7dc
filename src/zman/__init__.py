"""zman - an enhanced zellij session manager.

Lists sessions with short hash prefixes and per-tab summaries, attaches,
switches, creates, kills, renames and resurrects sessions, and installs
scripts plus their shell completions.
"""

__version__ = "0.1.0"

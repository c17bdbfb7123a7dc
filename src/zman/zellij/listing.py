"""Parsing of ``zellij list-sessions`` output into session records."""

from __future__ import annotations

import os

from zman.zellij.identity import digest
from zman.zellij.models import SessionRecord

EXITED_MARKER = "EXITED"
CURRENT_SESSION_ENV = "ZELLIJ_SESSION_NAME"

_ESC = "\x1b"


def get_current_session() -> str | None:
    """Return the name of the zellij session we are running in, if any."""
    return os.environ.get(CURRENT_SESSION_ENV) or None


def _first_token(line: str) -> str:
    parts = line.split()
    return parts[0] if parts else ""


def extract_session_name(line: str) -> str:
    """Pull the bare session name out of one listing line.

    zellij colors the name, e.g. ``\\x1b[32;1mmain\\x1b[m [Created ...]``.
    The name is the text between the end of the first escape sequence and
    the start of the next one. Uncolored lines use their first token.
    """
    start = line.find(_ESC)
    if start == -1:
        return _first_token(line)

    end_of_sequence = line.find("m", start)
    if end_of_sequence == -1:
        return _first_token(line)

    name_start = end_of_sequence + 1
    name_end = line.find(_ESC, name_start)
    if name_end == -1:
        return _first_token(line)

    return line[name_start:name_end].strip()


def parse_session_listing(
    raw: str,
    include_exited: bool = False,
    current_session: str | None = None,
) -> tuple[SessionRecord, ...]:
    """Turn raw listing text into session records, in listing order.

    Args:
        raw: Output of ``zellij list-sessions``.
        include_exited: Keep sessions marked ``EXITED``.
        current_session: Name of the session we are attached to, if any.

    Returns:
        Tuple of :class:`SessionRecord`, blank and nameless lines dropped.
    """
    records: list[SessionRecord] = []
    for line in raw.splitlines():
        if not line.strip():
            continue
        is_exited = EXITED_MARKER in line
        if is_exited and not include_exited:
            continue

        name = extract_session_name(line)
        if not name:
            continue

        records.append(
            SessionRecord(
                name=name,
                is_current=current_session is not None and name == current_session,
                is_exited=is_exited,
                hash_prefix=digest(name),
            )
        )
    return tuple(records)

"""Short, stable identifiers for zellij sessions.

Each session name maps to a fixed-length SHA-256 hex digest. Sessions are
shown with the shortest digest prefix that no other session in the same
listing shares, so ``z 3f`` is usually enough to pick one.
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

from zman.zellij.errors import SessionNotFoundError
from zman.zellij.models import SessionRecord

DIGEST_LENGTH = 8


def digest(name: str) -> str:
    """Return the first ``DIGEST_LENGTH`` hex characters of sha256(name)."""
    return hashlib.sha256(name.encode("utf-8")).hexdigest()[:DIGEST_LENGTH]


def shortest_unique_prefixes(sessions: Sequence[SessionRecord]) -> dict[str, str]:
    """Map every session name to its shortest unique digest prefix.

    Lengths are tried from 1 up to ``DIGEST_LENGTH``. When two names share
    the full digest no length is unique and both keep the full digest.
    """
    prefixes: dict[str, str] = {}
    for session in sessions:
        full = session.hash_prefix or digest(session.name)
        chosen = full
        for length in range(1, DIGEST_LENGTH + 1):
            candidate = full[:length]
            is_unique = all(
                not (other.hash_prefix or digest(other.name)).startswith(candidate)
                for other in sessions
                if other.name != session.name
            )
            if is_unique:
                chosen = candidate
                break
        prefixes[session.name] = chosen
    return prefixes


def find_session(query: str, sessions: Sequence[SessionRecord]) -> SessionRecord | None:
    """Return the first session whose name equals *query* or whose digest starts with it."""
    if not query:
        return None
    for session in sessions:
        if session.name == query or session.hash_prefix.startswith(query):
            return session
    return None


def require_session(query: str, sessions: Sequence[SessionRecord]) -> SessionRecord:
    """Like :func:`find_session` but raise :class:`SessionNotFoundError` on a miss."""
    session = find_session(query, sessions)
    if session is None:
        raise SessionNotFoundError(query)
    return session

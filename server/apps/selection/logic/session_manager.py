"""Session management for selection clients.

Each client gets its own SelectionEngine, so clients never share a
directory or a selection. Sessions live in process memory only and are
dropped after a period of inactivity.
"""

import logging
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Final

from django.conf import settings
from django.utils import timezone

from server.apps.selection.infrastructure.backends import create_engine
from server.apps.selection.logic.selection_engine import SelectionEngine

logger = logging.getLogger(__name__)

# Session ID length in bytes (generates 32 hex chars)
_SESSION_ID_BYTES: Final = 16

_USER_AGENT_MAX_LENGTH: Final = 255

_sessions: dict[str, 'SelectionSession'] = {}
_lock = threading.Lock()


@dataclass
class SelectionSession:
    """One client's engine plus bookkeeping."""

    session_id: str
    engine: SelectionEngine
    ip_address: str
    user_agent: str = ''
    created_at: datetime = field(default_factory=timezone.now)
    last_activity: datetime = field(default_factory=timezone.now)


def get_session_limit() -> int:
    """Get maximum concurrent sessions.

    Returns:
        Session limit from settings or default of 50.
    """
    return getattr(settings, 'SELECTION_SESSION_LIMIT', 50)


def get_session_timeout() -> int:
    """Get session timeout in seconds.

    Returns:
        Timeout in seconds from settings or default of 1800 (30 min).
    """
    return getattr(settings, 'SELECTION_SESSION_TIMEOUT', 1800)


def create_session(
    ip_address: str,
    user_agent: str = '',
) -> SelectionSession:
    """Create a new session with a fresh engine.

    Cleans stale sessions first, then checks the session limit.

    Args:
        ip_address: Client IP address.
        user_agent: Client user agent string.

    Returns:
        Created SelectionSession.

    Raises:
        SessionLimitExceededError: If too many sessions are active.
    """
    cleanup_stale_sessions()

    with _lock:
        limit = get_session_limit()
        if len(_sessions) >= limit:
            logger.warning(
                'Session limit exceeded: %d/%d',
                len(_sessions),
                limit,
            )
            raise SessionLimitExceededError(
                f'Maximum concurrent sessions ({limit}) exceeded',
            )

        session_id = secrets.token_hex(_SESSION_ID_BYTES)
        session = SelectionSession(
            session_id=session_id,
            engine=create_engine(),
            ip_address=ip_address,
            user_agent=user_agent[:_USER_AGENT_MAX_LENGTH],
        )
        _sessions[session_id] = session

    logger.info(
        'Selection session created for %s: %s',
        ip_address,
        session_id[:8],
    )
    return session


def get_session(session_id: str) -> SelectionSession | None:
    """Get a session by ID.

    Args:
        session_id: Session ID to look up.

    Returns:
        SelectionSession if found, None otherwise.
    """
    with _lock:
        return _sessions.get(session_id)


def update_session_activity(session_id: str) -> bool:
    """Update last activity timestamp for a session.

    Args:
        session_id: Session ID to update.

    Returns:
        True if session was found and updated, False otherwise.
    """
    with _lock:
        session = _sessions.get(session_id)
        if session is None:
            return False
        session.last_activity = timezone.now()
    return True


def end_session(session_id: str) -> bool:
    """End a session and discard its engine.

    Args:
        session_id: Session ID to end.

    Returns:
        True if session was found and removed, False otherwise.
    """
    with _lock:
        removed = _sessions.pop(session_id, None)

    if removed is not None:
        logger.info('Selection session ended: %s', session_id[:8])
    return removed is not None


def cleanup_stale_sessions() -> int:
    """Remove sessions that have been inactive past the timeout.

    Returns:
        Number of sessions cleaned up.
    """
    cutoff = timezone.now() - timedelta(seconds=get_session_timeout())

    with _lock:
        stale_ids = [
            session_id
            for session_id, session in _sessions.items()
            if session.last_activity < cutoff
        ]
        for session_id in stale_ids:
            del _sessions[session_id]

    if stale_ids:
        logger.info('Cleaned up %d stale selection sessions', len(stale_ids))
    return len(stale_ids)


def list_sessions() -> list[SelectionSession]:
    """Get all active sessions, most recently active first."""
    with _lock:
        sessions = list(_sessions.values())
    return sorted(
        sessions,
        key=lambda session: session.last_activity,
        reverse=True,
    )


class SessionLimitExceededError(Exception):
    """Raised when the maximum number of concurrent sessions is reached."""

"""Thread-safe registry of connected user sessions.

In-app toasts and browser notifications are published into per-user
queues. Clients drain their queue (HTTP polling or a stream endpoint).
Messages for users without a session are dropped, not buffered.
"""

import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from infrastructure.logging import get_module_logger
from integrations.realtime.models import (
    BrowserPermission,
    RealtimeEnvelope,
    UserSession,
)

logger = get_module_logger()


class SessionRegistry:
    """Tracks which users are connected and what their browser allows.

    Attributes:
        max_queue_size: Messages kept per session; oldest are discarded first

    Example:
        registry = SessionRegistry()
        registry.connect("user-1", browser_supported=True, permission="granted")

        registry.publish("user-1", "toast", {"title": "Reserva Confirmada"})
        messages = registry.drain("user-1")
    """

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._sessions: Dict[str, UserSession] = {}
        self._lock = threading.Lock()

    def connect(
        self,
        user_id: str,
        browser_supported: bool = False,
        permission: BrowserPermission | str = BrowserPermission.DEFAULT,
    ) -> UserSession:
        """Register (or refresh) the session of ``user_id``.

        Reconnecting keeps queued messages.
        """
        permission = BrowserPermission(permission)
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = UserSession(
                    user_id=user_id,
                    queue=deque(maxlen=self.max_queue_size),
                )
                self._sessions[user_id] = session
            session.browser_supported = browser_supported
            session.permission = permission

        logger.info(
            "realtime_session_connected",
            user_id=user_id,
            browser_supported=browser_supported,
            permission=permission.value,
        )
        return session

    def disconnect(self, user_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(user_id, None) is not None
        if removed:
            logger.info("realtime_session_disconnected", user_id=user_id)
        return removed

    def update_permission(
        self, user_id: str, permission: BrowserPermission | str
    ) -> bool:
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return False
            session.permission = BrowserPermission(permission)
        return True

    def is_connected(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._sessions

    def can_show_browser_notifications(self, user_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(user_id)
            return session is not None and session.can_show_browser_notifications

    def connected_users(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def publish(self, user_id: str, event_type: str, payload: Dict[str, Any]) -> bool:
        """Queue a message for ``user_id``.

        Returns:
            True if the user had a session, False if the message was dropped.
        """
        envelope = RealtimeEnvelope(
            event_type=event_type,
            payload=payload,
            published_at=datetime.now(timezone.utc),
        )
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return False
            session.queue.append(envelope)
        return True

    def drain(self, user_id: str, limit: Optional[int] = None) -> List[RealtimeEnvelope]:
        """Remove and return queued messages, oldest first."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return []
            count = len(session.queue) if limit is None else min(limit, len(session.queue))
            return [session.queue.popleft() for _ in range(count)]

"""
Repair Session Store - in-memory registry of repair workspaces

Sessions live only in process memory:
- scoped to the user that created them
- expire after REPAIR_SESSION_TTL_SECONDS without access
- a background task sweeps expired sessions periodically

Usage:
    session = repair_sessions.create(user_id, code)
    session = repair_sessions.get(session.id, user_id)
    repair_sessions.delete(session.id, user_id)
"""

import asyncio
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sentinel.core.config import settings
from sentinel.core.exceptions import RepairSessionNotFoundError
from sentinel.core.logging_config import logger
from sentinel.modules.repair.session import RepairSession


class RepairSessionStore:
    """Thread-safe, TTL-expiring map of session id -> RepairSession"""

    def __init__(
        self,
        ttl_seconds: int = settings.REPAIR_SESSION_TTL_SECONDS,
        cleanup_interval: int = settings.REPAIR_SESSION_CLEANUP_INTERVAL,
    ):
        self.ttl_seconds = ttl_seconds
        self.cleanup_interval = cleanup_interval
        self._sessions: Dict[str, RepairSession] = {}
        self._lock = threading.Lock()
        self._cleanup_task: Optional[asyncio.Task] = None

    def _expired(self, session: RepairSession, now: datetime) -> bool:
        return now - session.last_accessed > timedelta(seconds=self.ttl_seconds)

    def add(self, session: RepairSession) -> RepairSession:
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"[RepairStore] Registered session {session.id}")
        return session

    def create(self, user_id: Optional[str] = None, code: str = "") -> RepairSession:
        return self.add(RepairSession(user_id=user_id, current_code=code))

    def get(self, session_id: str, user_id: Optional[str] = None) -> RepairSession:
        """Fetch a live session owned by `user_id`; raises RepairSessionNotFoundError otherwise"""
        now = datetime.utcnow()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and self._expired(session, now):
                del self._sessions[session_id]
                session = None

        if session is None or (user_id is not None and session.user_id != user_id):
            raise RepairSessionNotFoundError(session_id)

        session.touch()
        return session

    def list_for_user(self, user_id: str) -> List[RepairSession]:
        now = datetime.utcnow()
        with self._lock:
            return [
                s for s in self._sessions.values()
                if s.user_id == user_id and not self._expired(s, now)
            ]

    def delete(self, session_id: str, user_id: Optional[str] = None) -> None:
        self.get(session_id, user_id)
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.info(f"[RepairStore] Deleted session {session_id}")

    def cleanup_expired_sessions(self) -> int:
        now = datetime.utcnow()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.info(f"[RepairStore] Cleaned up {len(expired)} expired sessions")
        return len(expired)

    async def start_cleanup_task(self) -> None:
        async def cleanup_loop():
            while True:
                await asyncio.sleep(self.cleanup_interval)
                try:
                    self.cleanup_expired_sessions()
                except Exception as e:
                    logger.error(f"[RepairStore] Cleanup error: {e}")

        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(cleanup_loop())
            logger.info("[RepairStore] Started session cleanup task")

    def stop_cleanup_task(self) -> None:
        if self._cleanup_task:
            self._cleanup_task.cancel()
            self._cleanup_task = None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "active_sessions": len(self._sessions),
                "ttl_seconds": self.ttl_seconds,
            }


# Singleton instance
repair_sessions = RepairSessionStore()

"""
Session repository for engine state storage.

Implements the Repository pattern over in-memory engine sessions.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, List, Optional
import asyncio

from ..models.domain import EngineSession
from ..core.errors import SessionNotFoundError
from ..core.logging import get_context_logger
from ..core.config import settings

logger = get_context_logger(__name__)

SessionTransform = Callable[[EngineSession], EngineSession]


class SessionRepositoryInterface(ABC):
    """Abstract interface for session repository"""

    @abstractmethod
    async def get(self, session_id: str) -> EngineSession:
        """Get a session by ID"""
        pass

    @abstractmethod
    async def add(self, session: EngineSession) -> EngineSession:
        """Store a new session"""
        pass

    @abstractmethod
    async def update(self, session_id: str, transform: SessionTransform) -> EngineSession:
        """Atomically replace a session with transform(session)"""
        pass

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove a session"""
        pass

    @abstractmethod
    async def list(self) -> List[EngineSession]:
        """List stored sessions, oldest first"""
        pass


class InMemorySessionRepository(SessionRepositoryInterface):
    """
    In-memory session repository.

    Sessions live in insertion order; when ``max_sessions`` is reached the
    oldest session is evicted to make room. All access goes through one
    asyncio.Lock, so an update's read-transform-write never interleaves with
    another request.
    """

    def __init__(self, max_sessions: Optional[int] = None):
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self._sessions: "OrderedDict[str, EngineSession]" = OrderedDict()
        self._lock = asyncio.Lock()

        logger.info(
            "Initialized InMemorySessionRepository",
            extra_data={"max_sessions": self.max_sessions}
        )

    async def get(self, session_id: str) -> EngineSession:
        async with self._lock:
            return self._get(session_id)

    def _get(self, session_id: str) -> EngineSession:
        session = self._sessions.get(session_id)
        if session is None:
            logger.warning(
                "Session not found",
                extra_data={"session_id": session_id}
            )
            raise SessionNotFoundError(session_id)
        return session

    async def add(self, session: EngineSession) -> EngineSession:
        async with self._lock:
            while len(self._sessions) >= self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info(
                    "Evicted oldest session",
                    extra_data={"session_id": evicted_id}
                )
            self._sessions[session.session_id] = session

        logger.debug(
            "Session stored",
            extra_data={"session_id": session.session_id}
        )
        return session

    async def update(self, session_id: str, transform: SessionTransform) -> EngineSession:
        async with self._lock:
            updated = transform(self._get(session_id))
            self._sessions[session_id] = updated
            return updated

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._get(session_id)
            del self._sessions[session_id]

    async def list(self) -> List[EngineSession]:
        async with self._lock:
            return list(self._sessions.values())

    async def count(self) -> int:
        async with self._lock:
            return len(self._sessions)


# Singleton instance
_session_repository: Optional[InMemorySessionRepository] = None


def get_session_repository() -> InMemorySessionRepository:
    """Get session repository instance (singleton)"""
    global _session_repository

    if _session_repository is None:
        _session_repository = InMemorySessionRepository()

    return _session_repository

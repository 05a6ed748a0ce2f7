"""In-process store for two-phase import sessions.

Phase 1 parses the files and parks the result here under a random token;
phase 2 pops it exactly once. The store is bounded (oldest sessions are
evicted on overflow) and sessions older than the TTL are treated as gone.
Nothing is persisted: a restart forgets every pending session.
"""

import logging
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from spendbook.schemas.internal import ParsedFile, ParsedTransaction

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class ImportSession:
    """Parsed, not yet reconciled files awaiting conversion rates."""

    session_id: str
    files: list[ParsedFile]
    created_at: float

    @property
    def transactions(self) -> list[ParsedTransaction]:
        """All candidates across files, in file order."""
        return [txn for parsed in self.files for txn in parsed.transactions]


@dataclass
class ImportSessionStore:
    """Bounded, TTL-limited mapping of session id to ``ImportSession``.

    Args:
        max_size: Sessions kept before the oldest is evicted
        ttl_seconds: Age after which a session counts as expired
        clock: Monotonic time source in seconds (injectable for tests)
    """

    max_size: int = 100
    ttl_seconds: float = 3600
    clock: Clock = time.monotonic
    _sessions: "OrderedDict[str, ImportSession]" = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.max_size < 1:
            raise ValueError("max_size must be at least 1")

    def create(self, files: list[ParsedFile]) -> ImportSession:
        """Store parsed files under a fresh session id."""
        self.sweep()

        session = ImportSession(
            session_id=uuid.uuid4().hex,
            files=files,
            created_at=self.clock(),
        )
        self._sessions[session.session_id] = session

        while len(self._sessions) > self.max_size:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted import session on overflow", extra={"session_id": evicted_id})

        return session

    def pop(self, session_id: str) -> ImportSession | None:
        """Remove and return a live session; expired or unknown ids yield None."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None
        if self._is_expired(session):
            logger.info("Import session expired", extra={"session_id": session_id})
            return None
        return session

    def sweep(self) -> int:
        """Drop expired sessions; return how many were removed."""
        expired = [sid for sid, session in self._sessions.items() if self._is_expired(session)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Swept expired import sessions", extra={"count": len(expired)})
        return len(expired)

    def _is_expired(self, session: ImportSession) -> bool:
        return self.clock() - session.created_at >= self.ttl_seconds

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

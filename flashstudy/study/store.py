"""
In-memory home for live study sessions.

Sessions are ephemeral: they live in the process that created them and
are dropped when the user leaves, when they go idle, or when the user
opens too many at once. Nothing here is persisted.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Tuple
from uuid import uuid4

from flashstudy.core.exceptions import StudySessionNotFoundError
from flashstudy.study.controls import TransitionResult
from flashstudy.study.engine import SessionState, StudyCard, start_session

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StudySession:
    """A live session and the card list it was opened with."""
    id: str
    deck_id: int
    user_id: str
    cards: Tuple[StudyCard, ...]
    state: SessionState
    last_active_at: datetime


class StudySessionStore:
    """
    Owns every live SessionState.

    Each event is applied with apply(), which reads the session's state,
    runs one synchronous transition and stores the result without
    yielding to the event loop in between. Two events racing on the same
    session are therefore applied one after the other, never interleaved.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=120),
        max_sessions_per_user: int = 5,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.ttl = ttl
        self.max_sessions_per_user = max_sessions_per_user
        self._clock = clock
        self._sessions: Dict[str, StudySession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, deck_id: int, user_id: str, cards: List[StudyCard]) -> StudySession:
        """
        Open a new session over cards in source order.

        Args:
            deck_id: Deck being studied
            user_id: Session owner
            cards: Card source list, fetched once by the caller

        Returns:
            The new StudySession
        """
        self.evict_expired()
        self._enforce_user_limit(user_id)

        now = self._clock()
        source = tuple(cards)
        session = StudySession(
            id=str(uuid4()),
            deck_id=deck_id,
            user_id=user_id,
            cards=source,
            state=start_session(source),
            last_active_at=now,
        )
        self._sessions[session.id] = session

        logger.info(
            f"[StudySessionStore] Opened session {session.id} on deck {deck_id} "
            f"({len(source)} cards) for user {user_id}"
        )
        return session

    def get(self, session_id: str, user_id: str) -> StudySession:
        """
        Get a live session owned by user_id.

        Raises:
            StudySessionNotFoundError: If missing, expired or owned by someone else
        """
        self.evict_expired()
        session = self._sessions.get(session_id)
        if session is None or session.user_id != user_id:
            raise StudySessionNotFoundError(f"Study session not found: {session_id}")
        return session

    def apply(
        self,
        session_id: str,
        user_id: str,
        transition: Callable[[StudySession], TransitionResult],
    ) -> Tuple[StudySession, TransitionResult]:
        """
        Apply one input event to a session.

        The transition must be synchronous; it receives the session and
        returns the TransitionResult whose state replaces the current one.
        """
        session = self.get(session_id, user_id)
        result = transition(session)
        session.state = result.state
        session.last_active_at = self._clock()

        if result.completed:
            logger.info(
                f"[StudySessionStore] Session {session_id} complete: "
                f"{result.state.correct_count} correct, {result.state.incorrect_count} incorrect"
            )
        return session, result

    def discard(self, session_id: str, user_id: str) -> StudySession:
        """Remove a session when the user navigates away."""
        session = self.get(session_id, user_id)
        del self._sessions[session_id]
        logger.info(f"[StudySessionStore] Closed session {session_id}")
        return session

    def discard_for_deck(self, deck_id: int) -> int:
        """Drop every session studying a deck (e.g. after the deck is deleted)."""
        stale = [s.id for s in self._sessions.values() if s.deck_id == deck_id]
        for session_id in stale:
            del self._sessions[session_id]
        return len(stale)

    def evict_expired(self) -> int:
        """Drop sessions idle for longer than the TTL."""
        cutoff = self._clock() - self.ttl
        expired = [s.id for s in self._sessions.values() if s.last_active_at < cutoff]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"[StudySessionStore] Evicted {len(expired)} idle session(s)")
        return len(expired)

    def _enforce_user_limit(self, user_id: str) -> None:
        owned = sorted(
            (s for s in self._sessions.values() if s.user_id == user_id),
            key=lambda s: s.last_active_at,
        )
        while owned and len(owned) >= self.max_sessions_per_user:
            oldest = owned.pop(0)
            del self._sessions[oldest.id]
            logger.info(f"[StudySessionStore] Dropped oldest session {oldest.id} for user {user_id}")

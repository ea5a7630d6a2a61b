"""
Study service - opens sessions from a deck's cards and feeds input events
to the session engine.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from flashstudy.core.exceptions import EmptyDeckError
from flashstudy.flashcards.service import FlashcardService
from flashstudy.study.controls import StudyAction, TransitionResult, handle_key, handle_pointer
from flashstudy.study.engine import StudyCard
from flashstudy.study.schemas import StudyCardRead, StudyExitResponse, StudySessionRead
from flashstudy.study.store import StudySession, StudySessionStore

logger = logging.getLogger(__name__)


def deck_path(deck_id: int) -> str:
    """Client path of a deck's page."""
    return f"/decks/{deck_id}"


class StudyService:
    """Service for study session lifecycle and input handling."""

    def __init__(self, store: StudySessionStore, db: Optional[AsyncSession] = None):
        self.store = store
        self.db = db

    async def start(self, deck_id: int, user_id: str) -> StudySessionRead:
        """
        Open a study session on a deck.

        The deck's cards are fetched once here; the session never re-reads them.

        Raises:
            DeckNotFoundError / PermissionError: If the deck is missing or not owned
            EmptyDeckError: If the deck has no cards
        """
        logger.info(f"[StudyService] Starting session on deck: {deck_id} for user: {user_id}")

        cards = await FlashcardService(self.db).list_cards(deck_id, user_id=user_id)
        if not cards:
            raise EmptyDeckError(deck_id)

        session = self.store.create(
            deck_id=deck_id,
            user_id=user_id,
            cards=[StudyCard(id=c.id, front=c.front, back=c.back) for c in cards],
        )
        return self._to_read_dto(session)

    def get(self, session_id: str, user_id: str) -> StudySessionRead:
        """Current render state of a session."""
        return self._to_read_dto(self.store.get(session_id, user_id))

    def press_button(
        self,
        session_id: str,
        user_id: str,
        action: StudyAction,
        position: Optional[int] = None,
    ) -> StudySessionRead:
        """Apply a pointer event."""
        session, result = self.store.apply(
            session_id,
            user_id,
            lambda s: handle_pointer(s.state, action, target=position, cards=s.cards),
        )
        return self._to_read_dto(session, result)

    def press_key(
        self,
        session_id: str,
        user_id: str,
        key: str,
        suppressed: bool = False,
    ) -> StudySessionRead:
        """Apply a keyboard event."""
        session, result = self.store.apply(
            session_id,
            user_id,
            lambda s: handle_key(s.state, key, suppressed=suppressed),
        )
        return self._to_read_dto(session, result)

    def leave(self, session_id: str, user_id: str) -> StudyExitResponse:
        """Discard a session and point the client back to its deck."""
        session = self.store.discard(session_id, user_id)
        return StudyExitResponse(deck_id=session.deck_id, redirect_to=deck_path(session.deck_id))

    def _to_read_dto(
        self,
        session: StudySession,
        result: Optional[TransitionResult] = None,
    ) -> StudySessionRead:
        """Convert a live session to its StudySessionRead DTO."""
        state = session.state
        card = state.current_card
        return StudySessionRead(
            session_id=session.id,
            deck_id=session.deck_id,
            current_card=StudyCardRead(id=card.id, front=card.front, back=card.back) if card else None,
            position=state.position,
            total_cards=state.total_cards,
            progress_percent=state.progress_percent,
            accuracy_percent=state.accuracy_percent,
            correct_count=state.correct_count,
            incorrect_count=state.incorrect_count,
            revealed=state.revealed,
            answered=state.answered,
            complete=state.complete,
            completed_now=result.completed if result else False,
            handled=result.handled if result else True,
        )


def get_study_service(store: StudySessionStore, db: Optional[AsyncSession] = None) -> StudyService:
    """Factory function for StudyService."""
    return StudyService(store, db)

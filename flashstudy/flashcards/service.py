"""
Flashcards service - Business logic for deck and card management.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from flashstudy.config import get_settings
from flashstudy.core.exceptions import DeckLimitReachedError
from flashstudy.flashcards.models import Card, Deck
from flashstudy.flashcards.repository import CardRepository, DeckRepository
from flashstudy.flashcards.schemas import (
    CardCreate,
    CardRead,
    CardUpdate,
    DeckCreate,
    DeckDetail,
    DeckList,
    DeckRead,
    DeckUpdate,
)

logger = logging.getLogger(__name__)
settings = get_settings()


class FlashcardService:
    """Service for deck and card business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.deck_repo = DeckRepository(db)
        self.card_repo = CardRepository(db)

    # ═══════════════════════════════════════════════════════════════════════
    # DECK OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    async def create_deck(
        self,
        deck_data: DeckCreate,
        user_id: str,
        unlimited_decks: bool = False,
    ) -> DeckRead:
        """
        Create a new deck for a user.

        Users without the unlimited decks feature are capped at
        settings.free_plan_deck_limit decks.

        Raises:
            DeckLimitReachedError: If the free plan limit is reached
        """
        logger.info(f"[FlashcardService] Creating deck: {deck_data.name} for user: {user_id}")

        if not unlimited_decks:
            deck_count = await self.deck_repo.count(user_id=user_id)
            if deck_count >= settings.free_plan_deck_limit:
                raise DeckLimitReachedError(
                    f"Free plan limited to {settings.free_plan_deck_limit} decks. "
                    "Upgrade to Pro for unlimited decks."
                )

        deck = await self.deck_repo.create(deck_data, user_id=user_id)
        return self._deck_to_read_dto(deck, card_count=0)

    async def get_deck(self, deck_id: int, user_id: str) -> DeckDetail:
        """Get a deck with all its cards."""
        logger.info(f"[FlashcardService] Getting deck: {deck_id} for user: {user_id}")

        deck = await self.deck_repo.get_by_id(deck_id, user_id=user_id)
        cards = await self.card_repo.list_by_deck(deck_id)
        return DeckDetail(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            created_at=deck.created_at,
            updated_at=deck.updated_at,
            cards=[self._card_to_read_dto(c) for c in cards],
        )

    async def list_decks(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> DeckList:
        """List all decks for a user with card counts."""
        logger.info(f"[FlashcardService] Listing decks for user: {user_id}")

        decks = await self.deck_repo.get_all(user_id=user_id, skip=skip, limit=limit)
        total = await self.deck_repo.count(user_id=user_id)
        card_counts = await self.deck_repo.get_card_counts(user_id=user_id)

        return DeckList(
            decks=[
                self._deck_to_read_dto(d, card_count=card_counts.get(d.id, 0))
                for d in decks
            ],
            total=total,
        )

    async def update_deck(
        self,
        deck_id: int,
        deck_data: DeckUpdate,
        user_id: str,
    ) -> DeckRead:
        """Update a deck."""
        logger.info(f"[FlashcardService] Updating deck: {deck_id} for user: {user_id}")

        deck = await self.deck_repo.update(deck_id, deck_data, user_id=user_id)
        card_counts = await self.deck_repo.get_card_counts(user_id=user_id)
        return self._deck_to_read_dto(deck, card_count=card_counts.get(deck.id, 0))

    async def delete_deck(self, deck_id: int, user_id: str) -> bool:
        """Delete a deck and all its cards."""
        logger.info(f"[FlashcardService] Deleting deck: {deck_id} for user: {user_id}")
        return await self.deck_repo.delete(deck_id, user_id=user_id)

    # ═══════════════════════════════════════════════════════════════════════
    # CARD OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    async def list_cards(self, deck_id: int, user_id: str) -> List[Card]:
        """
        Get the cards of a deck the user owns, most recently updated first.

        This is the card source for study sessions.
        """
        await self.deck_repo.get_by_id(deck_id, user_id=user_id)
        return list(await self.card_repo.list_by_deck(deck_id))

    async def create_card(self, deck_id: int, card_data: CardCreate, user_id: str) -> CardRead:
        """Create a card after verifying the user owns the deck."""
        logger.info(f"[FlashcardService] Creating card in deck: {deck_id}")

        await self.deck_repo.get_by_id(deck_id, user_id=user_id)
        card = await self.card_repo.create(deck_id, card_data)
        return self._card_to_read_dto(card)

    async def add_cards(self, deck: Deck, cards: List[dict]) -> List[Card]:
        """Insert several cards into a deck the caller already verified."""
        return await self.card_repo.bulk_create(deck.id, cards)

    async def update_card(
        self,
        deck_id: int,
        card_id: int,
        card_data: CardUpdate,
        user_id: str,
    ) -> CardRead:
        """Update a card after verifying the user owns its deck."""
        logger.info(f"[FlashcardService] Updating card: {card_id} in deck: {deck_id}")

        await self.deck_repo.get_by_id(deck_id, user_id=user_id)
        card = await self.card_repo.update(card_id, deck_id, card_data)
        return self._card_to_read_dto(card)

    async def delete_card(self, deck_id: int, card_id: int, user_id: str) -> bool:
        """Delete a card after verifying the user owns its deck."""
        logger.info(f"[FlashcardService] Deleting card: {card_id} in deck: {deck_id}")

        await self.deck_repo.get_by_id(deck_id, user_id=user_id)
        return await self.card_repo.delete(card_id, deck_id)

    # ═══════════════════════════════════════════════════════════════════════
    # DTO TRANSFORMATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def _deck_to_read_dto(self, deck: Deck, card_count: int = 0) -> DeckRead:
        """Convert Deck model to DeckRead DTO."""
        return DeckRead(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            card_count=card_count,
            created_at=deck.created_at,
            updated_at=deck.updated_at,
        )

    def _card_to_read_dto(self, card: Card) -> CardRead:
        """Convert Card model to CardRead DTO."""
        return CardRead(
            id=card.id,
            deck_id=card.deck_id,
            front=card.front,
            back=card.back,
            created_at=card.created_at,
            updated_at=card.updated_at,
        )


def get_flashcard_service(db: AsyncSession) -> FlashcardService:
    """Factory function for FlashcardService."""
    return FlashcardService(db)

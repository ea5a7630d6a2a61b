"""
Flashcards repository - Data Access Layer for decks and cards.
Handles all database operations for Deck and Card entities.
Deck access is always checked against the owning user.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashstudy.core.exceptions import CardNotFoundError, DeckNotFoundError
from flashstudy.flashcards.models import Card, Deck
from flashstudy.flashcards.schemas import CardCreate, CardUpdate, DeckCreate, DeckUpdate

logger = logging.getLogger(__name__)


class DeckRepository:
    """Repository for Deck CRUD operations with user filtering."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, deck_data: DeckCreate, user_id: str) -> Deck:
        """
        Create a new deck for a user.

        Args:
            deck_data: Deck creation DTO
            user_id: Owner user ID

        Returns:
            Created Deck entity
        """
        now = datetime.now(timezone.utc)
        deck = Deck(
            name=deck_data.name,
            description=deck_data.description,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )

        self.db.add(deck)
        await self.db.flush()

        logger.info(f"[DeckRepository] Created deck: {deck.id} - {deck.name} for user: {user_id}")
        return deck

    async def get_by_id(
        self,
        deck_id: int,
        user_id: Optional[str] = None,
        with_cards: bool = False,
    ) -> Deck:
        """
        Get a deck by its ID.

        Args:
            deck_id: Deck ID
            user_id: User ID for ownership verification (skipped when None)
            with_cards: Whether to eagerly load cards

        Returns:
            Deck entity

        Raises:
            DeckNotFoundError: If deck not found
            PermissionError: If deck doesn't belong to user
        """
        stmt = select(Deck).where(Deck.id == deck_id)

        if with_cards:
            stmt = stmt.options(selectinload(Deck.cards))

        result = await self.db.execute(stmt)
        deck = result.scalar_one_or_none()

        if deck is None:
            raise DeckNotFoundError(f"Deck not found: {deck_id}")

        if user_id is not None and deck.user_id != user_id:
            raise PermissionError(f"Deck {deck_id} does not belong to user {user_id}")

        return deck

    async def get_all(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> Sequence[Deck]:
        """Get a user's decks, newest first."""
        stmt = (
            select(Deck)
            .where(Deck.user_id == user_id)
            .order_by(Deck.created_at.desc(), Deck.id.desc())
            .offset(skip)
            .limit(limit)
        )

        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count(self, user_id: str) -> int:
        """Count total number of decks for a user."""
        stmt = select(func.count()).select_from(Deck).where(Deck.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def get_card_counts(self, user_id: str) -> Dict[int, int]:
        """
        Get card counts for all decks of a user.

        Returns:
            Dict mapping deck_id to card_count
        """
        stmt = (
            select(Deck.id, func.count(Card.id).label("card_count"))
            .outerjoin(Card, Card.deck_id == Deck.id)
            .where(Deck.user_id == user_id)
            .group_by(Deck.id)
        )

        result = await self.db.execute(stmt)
        return {row[0]: row[1] for row in result.all()}

    async def update(
        self,
        deck_id: int,
        deck_data: DeckUpdate,
        user_id: str,
    ) -> Deck:
        """Replace a deck's name and description."""
        deck = await self.get_by_id(deck_id, user_id=user_id)

        deck.name = deck_data.name
        deck.description = deck_data.description
        deck.updated_at = datetime.now(timezone.utc)
        await self.db.flush()

        logger.info(f"[DeckRepository] Updated deck: {deck.id}")
        return deck

    async def delete(self, deck_id: int, user_id: str) -> bool:
        """
        Delete a deck and its cards.

        Returns:
            True if deleted
        """
        deck = await self.get_by_id(deck_id, user_id=user_id, with_cards=True)
        await self.db.delete(deck)
        await self.db.flush()

        logger.info(f"[DeckRepository] Deleted deck: {deck_id}")
        return True


class CardRepository:
    """Repository for Card CRUD operations. Callers verify deck ownership first."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, deck_id: int, card_data: CardCreate) -> Card:
        """Create a card in a deck."""
        now = datetime.now(timezone.utc)
        card = Card(
            deck_id=deck_id,
            front=card_data.front,
            back=card_data.back,
            created_at=now,
            updated_at=now,
        )

        self.db.add(card)
        await self.db.flush()

        logger.info(f"[CardRepository] Created card: {card.id} in deck: {deck_id}")
        return card

    async def bulk_create(self, deck_id: int, cards: List[Dict[str, str]]) -> List[Card]:
        """
        Bulk create cards.

        Args:
            deck_id: Parent deck ID
            cards: List of dicts with 'front' and 'back' keys

        Returns:
            List of created Card entities
        """
        now = datetime.now(timezone.utc)
        created = [
            Card(
                deck_id=deck_id,
                front=card["front"],
                back=card["back"],
                created_at=now,
                updated_at=now,
            )
            for card in cards
        ]

        self.db.add_all(created)
        await self.db.flush()

        logger.info(f"[CardRepository] Bulk created {len(created)} cards in deck: {deck_id}")
        return created

    async def get_by_id(self, card_id: int, deck_id: int) -> Card:
        """
        Get a card that belongs to a deck.

        Raises:
            CardNotFoundError: If the card doesn't exist in that deck
        """
        stmt = select(Card).where(Card.id == card_id).where(Card.deck_id == deck_id)
        result = await self.db.execute(stmt)
        card = result.scalar_one_or_none()

        if card is None:
            raise CardNotFoundError(f"Card not found: {card_id}")
        return card

    async def list_by_deck(self, deck_id: int) -> Sequence[Card]:
        """Get all cards in a deck, most recently updated first."""
        stmt = (
            select(Card)
            .where(Card.deck_id == deck_id)
            .order_by(Card.updated_at.desc(), Card.id.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def update(self, card_id: int, deck_id: int, card_data: CardUpdate) -> Card:
        """Replace both sides of a card."""
        card = await self.get_by_id(card_id, deck_id)

        card.front = card_data.front
        card.back = card_data.back
        card.updated_at = datetime.now(timezone.utc)
        await self.db.flush()

        logger.info(f"[CardRepository] Updated card: {card_id}")
        return card

    async def delete(self, card_id: int, deck_id: int) -> bool:
        """Delete a card from a deck."""
        card = await self.get_by_id(card_id, deck_id)
        await self.db.delete(card)
        await self.db.flush()

        logger.info(f"[CardRepository] Deleted card: {card_id}")
        return True

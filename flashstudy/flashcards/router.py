"""
Flashcards router - API endpoints for deck and card management.
All routes require authentication and filter by user.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from flashstudy.auth.schemas import PlanFeature
from flashstudy.core.exceptions import CardNotFoundError, DeckLimitReachedError, DeckNotFoundError
from flashstudy.database import get_db
from flashstudy.dependencies import CurrentUser, StudyStore
from flashstudy.flashcards.schemas import (
    CardCreate,
    CardRead,
    CardUpdate,
    DeckCreate,
    DeckDetail,
    DeckList,
    DeckRead,
    DeckUpdate,
    FlashcardError,
)
from flashstudy.flashcards.service import get_flashcard_service

logger = logging.getLogger(__name__)


def _deck_not_found(e: DeckNotFoundError, deck_id: int) -> JSONResponse:
    logger.warning(f"[DecksRouter] Deck not found: {deck_id}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": e.message, "code": "DECK_NOT_FOUND"},
    )


def _deck_forbidden(deck_id: int, user_id: str) -> HTTPException:
    logger.warning(f"[DecksRouter] Access denied to deck {deck_id} for user {user_id}")
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied - deck does not belong to user",
    )


# ═══════════════════════════════════════════════════════════════════════════
# DECK ROUTER
# ═══════════════════════════════════════════════════════════════════════════

decks_router = APIRouter(prefix="/decks", tags=["Decks"])


@decks_router.post(
    "",
    response_model=DeckRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new deck",
    description="Create a new deck for the authenticated user. Free plans are limited in the number of decks.",
    responses={
        201: {"model": DeckRead, "description": "Deck created"},
        401: {"description": "Not authenticated"},
        403: {"model": FlashcardError, "description": "Deck limit reached"},
    },
)
async def create_deck(
    deck_data: DeckCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> DeckRead:
    """Create a new deck."""
    logger.info(f"[DecksRouter] Creating deck: {deck_data.name}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        return await service.create_deck(
            deck_data,
            user_id=current_user.id,
            unlimited_decks=current_user.has(PlanFeature.UNLIMITED_DECKS),
        )
    except DeckLimitReachedError as e:
        logger.info(f"[DecksRouter] Deck limit reached for user: {current_user.id}")
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": e.message, "code": "DECK_LIMIT_REACHED"},
        )


@decks_router.get(
    "",
    response_model=DeckList,
    status_code=status.HTTP_200_OK,
    summary="List all decks",
    description="Get the authenticated user's decks, newest first.",
    responses={
        200: {"model": DeckList, "description": "List of decks"},
        401: {"description": "Not authenticated"},
    },
)
async def list_decks(
    current_user: CurrentUser,
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: AsyncSession = Depends(get_db),
) -> DeckList:
    """List all decks for the authenticated user."""
    logger.info(f"[DecksRouter] Listing decks (skip={skip}, limit={limit}), user: {current_user.id}")

    service = get_flashcard_service(db)
    return await service.list_decks(user_id=current_user.id, skip=skip, limit=limit)


@decks_router.get(
    "/{deck_id}",
    response_model=DeckDetail,
    status_code=status.HTTP_200_OK,
    summary="Get deck by ID",
    description="Get a specific deck with all its cards.",
    responses={
        200: {"model": DeckDetail, "description": "Deck with cards"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck not found"},
    },
)
async def get_deck(
    deck_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> DeckDetail:
    """Get a specific deck with all cards."""
    logger.info(f"[DecksRouter] Getting deck: {deck_id}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        return await service.get_deck(deck_id, user_id=current_user.id)
    except DeckNotFoundError as e:
        return _deck_not_found(e, deck_id)
    except PermissionError:
        raise _deck_forbidden(deck_id, current_user.id)


@decks_router.patch(
    "/{deck_id}",
    response_model=DeckRead,
    status_code=status.HTTP_200_OK,
    summary="Update deck",
    description="Replace a deck's name and description.",
    responses={
        200: {"model": DeckRead, "description": "Deck updated"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck not found"},
    },
)
async def update_deck(
    deck_id: int,
    deck_data: DeckUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> DeckRead:
    """Update a deck."""
    logger.info(f"[DecksRouter] Updating deck: {deck_id}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        return await service.update_deck(deck_id, deck_data, user_id=current_user.id)
    except DeckNotFoundError as e:
        return _deck_not_found(e, deck_id)
    except PermissionError:
        raise _deck_forbidden(deck_id, current_user.id)


@decks_router.delete(
    "/{deck_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete deck",
    description="Delete a deck and all its cards. Open study sessions on the deck are closed.",
    responses={
        204: {"description": "Deck deleted"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck not found"},
    },
)
async def delete_deck(
    deck_id: int,
    current_user: CurrentUser,
    study_store: StudyStore,
    db: AsyncSession = Depends(get_db),
):
    """Delete a deck."""
    logger.info(f"[DecksRouter] Deleting deck: {deck_id}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        await service.delete_deck(deck_id, user_id=current_user.id)
    except DeckNotFoundError as e:
        return _deck_not_found(e, deck_id)
    except PermissionError:
        raise _deck_forbidden(deck_id, current_user.id)

    # Live sessions are closed only once the deletion is durable
    await db.commit()
    study_store.discard_for_deck(deck_id)
    return None


# ═══════════════════════════════════════════════════════════════════════════
# CARD ROUTER
# ═══════════════════════════════════════════════════════════════════════════

cards_router = APIRouter(prefix="/decks/{deck_id}/cards", tags=["Cards"])


@cards_router.post(
    "",
    response_model=CardRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a card",
    description="Add a card to a deck owned by the authenticated user.",
    responses={
        201: {"model": CardRead, "description": "Card created"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck not found"},
    },
)
async def create_card(
    deck_id: int,
    card_data: CardCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> CardRead:
    """Create a card."""
    logger.info(f"[CardsRouter] Creating card in deck: {deck_id}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        return await service.create_card(deck_id, card_data, user_id=current_user.id)
    except DeckNotFoundError as e:
        return _deck_not_found(e, deck_id)
    except PermissionError:
        raise _deck_forbidden(deck_id, current_user.id)


@cards_router.patch(
    "/{card_id}",
    response_model=CardRead,
    status_code=status.HTTP_200_OK,
    summary="Update a card",
    description="Replace both sides of a card.",
    responses={
        200: {"model": CardRead, "description": "Card updated"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck or card not found"},
    },
)
async def update_card(
    deck_id: int,
    card_id: int,
    card_data: CardUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> CardRead:
    """Update a card."""
    logger.info(f"[CardsRouter] Updating card: {card_id}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        return await service.update_card(deck_id, card_id, card_data, user_id=current_user.id)
    except DeckNotFoundError as e:
        return _deck_not_found(e, deck_id)
    except CardNotFoundError as e:
        logger.warning(f"[CardsRouter] Card not found: {card_id}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": e.message, "code": "CARD_NOT_FOUND"},
        )
    except PermissionError:
        raise _deck_forbidden(deck_id, current_user.id)


@cards_router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a card",
    responses={
        204: {"description": "Card deleted"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck or card not found"},
    },
)
async def delete_card(
    deck_id: int,
    card_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Delete a card."""
    logger.info(f"[CardsRouter] Deleting card: {card_id}, user: {current_user.id}")

    try:
        service = get_flashcard_service(db)
        await service.delete_card(deck_id, card_id, user_id=current_user.id)
    except DeckNotFoundError as e:
        return _deck_not_found(e, deck_id)
    except CardNotFoundError as e:
        logger.warning(f"[CardsRouter] Card not found: {card_id}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": e.message, "code": "CARD_NOT_FOUND"},
        )
    except PermissionError:
        raise _deck_forbidden(deck_id, current_user.id)

    return None

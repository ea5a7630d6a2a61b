"""
Generation router - AI card generation for a deck.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from flashstudy.config import get_settings
from flashstudy.core.exceptions import (
    DeckNotFoundError,
    DescriptionRequiredError,
    ExternalAPIError,
    FeatureNotAvailableError,
    GenerationEmptyError,
)
from flashstudy.database import get_db
from flashstudy.dependencies import CurrentUser, OpenAIClient
from flashstudy.flashcards.schemas import FlashcardError
from flashstudy.generation.schemas import GenerateRequest, GenerateResponse
from flashstudy.generation.service import get_generation_service
from flashstudy.rate_limit import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

generation_router = APIRouter(prefix="/decks", tags=["Generation"])


@generation_router.post(
    "/{deck_id}/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate cards with AI",
    description="Generate cards from the deck's topic and description and add them to the deck. Requires the AI generation feature.",
    responses={
        201: {"model": GenerateResponse, "description": "Cards generated and saved"},
        400: {"model": FlashcardError, "description": "Deck has no description"},
        401: {"description": "Not authenticated"},
        403: {"model": FlashcardError, "description": "Feature not available on plan"},
        404: {"model": FlashcardError, "description": "Deck not found"},
        502: {"model": FlashcardError, "description": "AI returned no cards"},
        503: {"model": FlashcardError, "description": "AI service unavailable"},
    },
)
@limiter.limit(settings.generation_rate_limit)
async def generate_cards(
    request: Request,
    deck_id: int,
    generate_request: GenerateRequest,
    current_user: CurrentUser,
    client: OpenAIClient,
    db: AsyncSession = Depends(get_db),
) -> GenerateResponse:
    """Generate and save cards for a deck."""
    logger.info(f"[GenerationRouter] Generating cards for deck: {deck_id}, user: {current_user.id}")

    try:
        service = get_generation_service(db, client)
        return await service.generate_for_deck(deck_id, generate_request, user=current_user)
    except FeatureNotAvailableError as e:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": e.message, "code": "FEATURE_REQUIRED"},
        )
    except DeckNotFoundError as e:
        logger.warning(f"[GenerationRouter] Deck not found: {deck_id}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": e.message, "code": "DECK_NOT_FOUND"},
        )
    except PermissionError:
        logger.warning(f"[GenerationRouter] Access denied to deck {deck_id} for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied - deck does not belong to user",
        )
    except DescriptionRequiredError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": e.message, "code": "DESCRIPTION_REQUIRED"},
        )
    except GenerationEmptyError as e:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": e.message, "code": "GENERATION_EMPTY"},
        )
    except ExternalAPIError as e:
        logger.error(f"[GenerationRouter] AI generation failed: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": e.message, "code": "AI_SERVICE_ERROR"},
        )

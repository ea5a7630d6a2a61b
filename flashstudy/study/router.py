"""
Study router - API endpoints for interactive study sessions.

Clients forward button clicks to /actions and key presses to /keys; both
reach the same session engine transitions.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from flashstudy.core.exceptions import DeckNotFoundError, EmptyDeckError, StudySessionNotFoundError
from flashstudy.database import get_db
from flashstudy.dependencies import CurrentUser, StudyStore
from flashstudy.flashcards.schemas import FlashcardError
from flashstudy.study.schemas import (
    KeyPressRequest,
    StudyActionRequest,
    StudyExitResponse,
    StudySessionRead,
)
from flashstudy.study.service import deck_path, get_study_service

logger = logging.getLogger(__name__)

study_router = APIRouter(tags=["Study"])


def _session_not_found(e: StudySessionNotFoundError, session_id: str) -> JSONResponse:
    logger.warning(f"[StudyRouter] Session not found: {session_id}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": e.message, "code": "SESSION_NOT_FOUND"},
    )


@study_router.post(
    "/decks/{deck_id}/study",
    response_model=StudySessionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Start a study session",
    description="Open a study session over the deck's cards in their current order.",
    responses={
        201: {"model": StudySessionRead, "description": "Session started"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"model": FlashcardError, "description": "Deck not found"},
        409: {"description": "Deck has no cards; client should return to the deck"},
    },
)
async def start_session(
    deck_id: int,
    current_user: CurrentUser,
    store: StudyStore,
    db: AsyncSession = Depends(get_db),
) -> StudySessionRead:
    """Start a study session on a deck."""
    logger.info(f"[StudyRouter] Starting session on deck: {deck_id}, user: {current_user.id}")

    try:
        service = get_study_service(store, db)
        return await service.start(deck_id, user_id=current_user.id)
    except DeckNotFoundError as e:
        logger.warning(f"[StudyRouter] Deck not found: {deck_id}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": e.message, "code": "DECK_NOT_FOUND"},
        )
    except PermissionError:
        logger.warning(f"[StudyRouter] Access denied to deck {deck_id} for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied - deck does not belong to user",
        )
    except EmptyDeckError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": e.message, "code": "DECK_EMPTY", "redirect_to": deck_path(deck_id)},
        )


@study_router.get(
    "/study/{session_id}",
    response_model=StudySessionRead,
    status_code=status.HTTP_200_OK,
    summary="Get study session",
    responses={
        200: {"model": StudySessionRead, "description": "Current session state"},
        401: {"description": "Not authenticated"},
        404: {"model": FlashcardError, "description": "Session not found or expired"},
    },
)
async def get_session(
    session_id: str,
    current_user: CurrentUser,
    store: StudyStore,
) -> StudySessionRead:
    """Get the current state of a study session."""
    try:
        return get_study_service(store).get(session_id, user_id=current_user.id)
    except StudySessionNotFoundError as e:
        return _session_not_found(e, session_id)


@study_router.post(
    "/study/{session_id}/actions",
    response_model=StudySessionRead,
    status_code=status.HTTP_200_OK,
    summary="Apply a button action",
    description="Flip, navigate, grade, restart or shuffle from a button or card click.",
    responses={
        200: {"model": StudySessionRead, "description": "Updated session state"},
        401: {"description": "Not authenticated"},
        404: {"model": FlashcardError, "description": "Session not found or expired"},
    },
)
async def apply_action(
    session_id: str,
    action_request: StudyActionRequest,
    current_user: CurrentUser,
    store: StudyStore,
) -> StudySessionRead:
    """Apply a pointer action to a study session."""
    logger.debug(f"[StudyRouter] Action {action_request.action.value} on session: {session_id}")

    try:
        return get_study_service(store).press_button(
            session_id,
            user_id=current_user.id,
            action=action_request.action,
            position=action_request.position,
        )
    except StudySessionNotFoundError as e:
        return _session_not_found(e, session_id)


@study_router.post(
    "/study/{session_id}/keys",
    response_model=StudySessionRead,
    status_code=status.HTTP_200_OK,
    summary="Apply a key press",
    description=(
        "Space/Enter flip, arrows navigate, Y/N grade (only while the answer is showing). "
        "Set suppressed while a text field has focus."
    ),
    responses={
        200: {"model": StudySessionRead, "description": "Updated session state"},
        401: {"description": "Not authenticated"},
        404: {"model": FlashcardError, "description": "Session not found or expired"},
    },
)
async def press_key(
    session_id: str,
    key_request: KeyPressRequest,
    current_user: CurrentUser,
    store: StudyStore,
) -> StudySessionRead:
    """Apply a keyboard shortcut to a study session."""
    try:
        return get_study_service(store).press_key(
            session_id,
            user_id=current_user.id,
            key=key_request.key,
            suppressed=key_request.suppressed,
        )
    except StudySessionNotFoundError as e:
        return _session_not_found(e, session_id)


@study_router.delete(
    "/study/{session_id}",
    response_model=StudyExitResponse,
    status_code=status.HTTP_200_OK,
    summary="Leave a study session",
    description="Discard the session. Scores are not kept.",
    responses={
        200: {"model": StudyExitResponse, "description": "Session closed"},
        401: {"description": "Not authenticated"},
        404: {"model": FlashcardError, "description": "Session not found or expired"},
    },
)
async def leave_session(
    session_id: str,
    current_user: CurrentUser,
    store: StudyStore,
) -> StudyExitResponse:
    """Leave a study session and return to the deck."""
    try:
        return get_study_service(store).leave(session_id, user_id=current_user.id)
    except StudySessionNotFoundError as e:
        return _session_not_found(e, session_id)

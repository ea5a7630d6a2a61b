"""
Custom exceptions for the application.
"""

from typing import Optional

from fastapi import HTTPException, status


class FlashStudyException(Exception):
    """Base exception for FlashStudy application."""

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ═══════════════════════════════════════════════════════════════════════════
# AUTHENTICATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════

class InvalidTokenError(FlashStudyException):
    """Raised when a bearer token is invalid or expired."""
    pass


class FeatureNotAvailableError(FlashStudyException):
    """Raised when the user's plan does not include a feature."""

    def __init__(self, feature: str, message: Optional[str] = None):
        self.feature = feature
        super().__init__(message or f"Feature not available on your plan: {feature}")


# ═══════════════════════════════════════════════════════════════════════════
# DECK & CARD EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════

class DeckNotFoundError(FlashStudyException):
    """Raised when a deck is not found."""
    pass


class CardNotFoundError(FlashStudyException):
    """Raised when a card is not found."""
    pass


class DeckLimitReachedError(FlashStudyException):
    """Raised when a free-plan user already owns the maximum number of decks."""
    pass


# ═══════════════════════════════════════════════════════════════════════════
# STUDY SESSION EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════

class EmptyDeckError(FlashStudyException):
    """Raised when a study session is requested for a deck with no cards."""

    def __init__(self, deck_id: int, message: Optional[str] = None):
        self.deck_id = deck_id
        super().__init__(message or f"Deck {deck_id} has no cards to study")


class StudySessionNotFoundError(FlashStudyException):
    """Raised when a study session does not exist or has expired."""
    pass


# ═══════════════════════════════════════════════════════════════════════════
# AI GENERATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════

class DescriptionRequiredError(FlashStudyException):
    """Raised when AI generation is requested for a deck without a description."""
    pass


class GenerationEmptyError(FlashStudyException):
    """Raised when the AI returns no usable cards."""
    pass


class ExternalAPIError(FlashStudyException):
    """Raised when an external API call fails."""
    pass


# ═══════════════════════════════════════════════════════════════════════════
# HTTP EXCEPTION HELPERS
# ═══════════════════════════════════════════════════════════════════════════

def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

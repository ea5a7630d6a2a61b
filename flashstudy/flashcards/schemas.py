"""
Pydantic schemas for flashcards module.
DTOs for API input/output validation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════
# DECK SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class DeckCreate(BaseModel):
    """DTO for creating a new deck."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Deck name",
    )
    description: Optional[str] = Field(
        None,
        max_length=1000,
        description="Optional deck description (required later for AI generation)",
    )

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "example": {
                "name": "Spanish Basics",
                "description": "Learning Spanish: everyday greetings and phrases",
            }
        },
    }


class DeckUpdate(DeckCreate):
    """DTO for updating a deck (name and description are replaced)."""

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "example": {
                "name": "Spanish Basics (Updated)",
                "description": "Updated description",
            }
        },
    }


class DeckRead(BaseModel):
    """DTO for reading a deck (without cards)."""

    id: int = Field(..., description="Deck ID")
    name: str = Field(..., description="Deck name")
    description: Optional[str] = Field(None, description="Deck description")
    card_count: int = Field(0, description="Total number of cards")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {"from_attributes": True}


class DeckDetail(BaseModel):
    """DTO for reading a deck with all cards."""

    id: int = Field(..., description="Deck ID")
    name: str = Field(..., description="Deck name")
    description: Optional[str] = Field(None, description="Deck description")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    cards: List["CardRead"] = Field(
        default_factory=list,
        description="All cards in this deck, most recently updated first",
    )

    model_config = {"from_attributes": True}


class DeckList(BaseModel):
    """DTO for listing decks."""

    decks: List[DeckRead] = Field(..., description="List of decks")
    total: int = Field(..., description="Total number of decks")


# ═══════════════════════════════════════════════════════════════════════════
# CARD SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class CardCreate(BaseModel):
    """DTO for creating a card in a deck."""

    front: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Question/front side content",
    )
    back: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Answer/back side content",
    )

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "example": {
                "front": "Hello",
                "back": "Hola",
            }
        },
    }


class CardUpdate(CardCreate):
    """DTO for updating a card (both sides are replaced)."""
    pass


class CardRead(BaseModel):
    """DTO for reading a card."""

    id: int = Field(..., description="Card ID")
    deck_id: int = Field(..., description="Parent deck ID")
    front: str = Field(..., description="Question/front side")
    back: str = Field(..., description="Answer/back side")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {"from_attributes": True}


# ═══════════════════════════════════════════════════════════════════════════
# ERROR SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════


class FlashcardError(BaseModel):
    """Error response for deck and card operations."""

    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "Deck not found",
                "code": "DECK_NOT_FOUND",
            }
        }
    }


# Update forward references
DeckDetail.model_rebuild()

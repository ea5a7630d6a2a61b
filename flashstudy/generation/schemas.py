"""
Pydantic schemas for AI card generation.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from flashstudy.flashcards.schemas import CardRead


class GenerateRequest(BaseModel):
    """DTO for AI card generation. Both fields default to the deck's own."""

    topic: Optional[str] = Field(
        None,
        min_length=1,
        max_length=500,
        description="Topic to generate cards about (defaults to the deck name)",
    )
    description: Optional[str] = Field(
        None,
        max_length=1000,
        description="Extra context (defaults to the deck description)",
    )

    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "example": {
                "topic": "Spanish Basics",
                "description": "Learning Spanish: greetings and everyday phrases",
            }
        },
    }


class GeneratedCard(BaseModel):
    """A single card as returned by the model."""

    front: str = Field(..., min_length=1, max_length=5000)
    back: str = Field(..., min_length=1, max_length=5000)


class GenerateResponse(BaseModel):
    """Response after cards were generated and saved."""

    deck_id: int = Field(..., description="Deck the cards were added to")
    cards_generated: int = Field(..., description="Number of cards saved")
    cards: List[CardRead] = Field(default_factory=list, description="The saved cards")

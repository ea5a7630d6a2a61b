"""
Pydantic schemas for authentication.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PlanFeature(str, Enum):
    """Plan features granted through the token's ``features`` claim."""
    UNLIMITED_DECKS = "unlimited_decks"
    AI_FLASHCARD_GENERATION = "ai_flashcard_generation"


class TokenPayload(BaseModel):
    """Schema for JWT token payload."""
    sub: str  # user_id
    exp: Optional[datetime] = None
    features: List[str] = Field(default_factory=list)


class AuthenticatedUser(BaseModel):
    """The caller of a request, as resolved from its bearer token."""

    id: str = Field(..., description="User ID from the identity provider")
    features: List[str] = Field(default_factory=list, description="Enabled plan features")

    def has(self, feature: PlanFeature) -> bool:
        """Check whether the user's plan includes a feature."""
        return feature.value in self.features

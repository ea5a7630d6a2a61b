"""
Generation service - AI-generated cards saved straight into a deck.
"""

import json
import logging
from typing import List, Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from flashstudy.auth.schemas import AuthenticatedUser, PlanFeature
from flashstudy.config import get_settings
from flashstudy.core.exceptions import (
    DescriptionRequiredError,
    ExternalAPIError,
    FeatureNotAvailableError,
    GenerationEmptyError,
)
from flashstudy.flashcards.schemas import CardRead
from flashstudy.flashcards.service import FlashcardService
from flashstudy.generation.prompts import SYSTEM_PROMPT, build_prompt
from flashstudy.generation.schemas import GeneratedCard, GenerateRequest, GenerateResponse

logger = logging.getLogger(__name__)
settings = get_settings()


def parse_generated_cards(content: Optional[str]) -> List[GeneratedCard]:
    """
    Parse the model's JSON reply into cards.

    Entries with a blank or oversized side are dropped.

    Raises:
        ExternalAPIError: If the reply is empty or not JSON
    """
    if not content:
        raise ExternalAPIError("Empty response from AI")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"[GenerationService] Failed to parse AI response: {e}")
        raise ExternalAPIError("Failed to parse AI-generated cards")

    raw_cards = data.get("cards", []) if isinstance(data, dict) else []
    cards = []
    for raw in raw_cards:
        if not isinstance(raw, dict):
            continue
        try:
            cards.append(GeneratedCard(
                front=str(raw.get("front", "")).strip(),
                back=str(raw.get("back", "")).strip(),
            ))
        except ValidationError:
            continue
    return cards


class GenerationService:
    """Service for generating a deck's cards with OpenAI."""

    def __init__(self, db: AsyncSession, client: AsyncOpenAI):
        self.db = db
        self.client = client
        self.flashcards = FlashcardService(db)

    async def generate_for_deck(
        self,
        deck_id: int,
        request: GenerateRequest,
        user: AuthenticatedUser,
    ) -> GenerateResponse:
        """
        Generate cards for a deck and save them.

        Raises:
            FeatureNotAvailableError: If the plan lacks AI generation
            DeckNotFoundError / PermissionError: If the deck is missing or not owned
            DescriptionRequiredError: If there is no description to work from
            GenerationEmptyError: If the model returned no usable cards
            ExternalAPIError: If the OpenAI call fails
        """
        if not user.has(PlanFeature.AI_FLASHCARD_GENERATION):
            raise FeatureNotAvailableError(
                PlanFeature.AI_FLASHCARD_GENERATION.value,
                "AI flashcard generation is a Pro feature. Upgrade to access.",
            )

        deck = await self.flashcards.deck_repo.get_by_id(deck_id, user_id=user.id)

        topic = request.topic or deck.name
        description = request.description or deck.description
        if not description:
            raise DescriptionRequiredError("Please add a deck description before using AI generation.")

        logger.info(f"[GenerationService] Generating cards for deck: {deck_id}, topic: {topic}")
        content = await self._complete(build_prompt(topic, description))

        generated = parse_generated_cards(content)
        if not generated:
            raise GenerationEmptyError("Failed to generate flashcards. Please try again.")

        cards = await self.flashcards.add_cards(
            deck,
            [{"front": c.front, "back": c.back} for c in generated],
        )
        logger.info(f"[GenerationService] Saved {len(cards)} generated cards to deck: {deck_id}")

        return GenerateResponse(
            deck_id=deck_id,
            cards_generated=len(cards),
            cards=[CardRead.model_validate(c) for c in cards],
        )

    async def _complete(self, prompt: str) -> Optional[str]:
        """Run the chat completion, mapping provider errors to user-facing messages."""
        try:
            response = await self.client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
        except openai.AuthenticationError as e:
            logger.error(f"[GenerationService] OpenAI authentication failed: {e}")
            raise ExternalAPIError("AI service configuration error. Please contact support.")
        except openai.RateLimitError as e:
            logger.warning(f"[GenerationService] OpenAI rate limited: {e}")
            if "quota" in str(e):
                raise ExternalAPIError("OpenAI API quota exceeded. Please check your OpenAI billing settings.")
            raise ExternalAPIError("Too many requests. Please try again in a moment.")
        except openai.APITimeoutError as e:
            logger.warning(f"[GenerationService] OpenAI request timed out: {e}")
            raise ExternalAPIError("Request timed out. Please try again.")
        except openai.APIError as e:
            logger.error(f"[GenerationService] AI generation failed: {e}")
            raise ExternalAPIError("Failed to generate flashcards. Please try again.")

        return response.choices[0].message.content


def get_generation_service(db: AsyncSession, client: AsyncOpenAI) -> GenerationService:
    """Factory function for GenerationService."""
    return GenerationService(db, client)

"""
Flashcards module - Deck and card management.
"""

from flashstudy.flashcards.router import cards_router, decks_router

__all__ = ["cards_router", "decks_router"]

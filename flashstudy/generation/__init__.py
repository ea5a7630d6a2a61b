"""
Generation module - AI-generated cards for a deck.
"""

from flashstudy.generation.router import generation_router

__all__ = ["generation_router"]

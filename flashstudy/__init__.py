"""
FlashStudy - flashcard decks with interactive study sessions.
"""

__version__ = "0.1.0"

"""
Prompt templates for AI card generation.

Two flavours: language decks get bare term/translation pairs, every other
deck gets short question/answer pairs.
"""

from typing import Optional

CARDS_PER_GENERATION = 20

SYSTEM_PROMPT = "You are an expert flashcard creator. Respond ONLY with JSON."

# Only explicit language-learning or translation intent counts
LANGUAGE_LEARNING_PATTERNS = (
    "learning irish",
    "learning spanish",
    "learning french",
    "learning german",
    "learning italian",
    "learning portuguese",
    "learning russian",
    "learning chinese",
    "learning japanese",
    "learning korean",
    "learning arabic",
    "learning hindi",
    "learning english",
    "learn irish",
    "learn spanish",
    "learn french",
    "learn german",
    "learn italian",
    "translate",
    "translation",
    "english to",
    "to english",
    "spanish to",
    "to spanish",
    "french to",
    "to french",
    "into irish",
    "into spanish",
    "into french",
    "vocabulary",
    "vocab",
    "language learning",
    "language practice",
    "language course",
)

LANGUAGE_LEARNING_PROMPT = """Generate {count} flashcards for "{topic}"{context}.

FORMAT REQUIREMENTS:
- front: The term, word, phrase, or sentence to be learned
- back: The direct translation, definition, or answer ONLY (no explanations, descriptions, or additional context)

Examples of CORRECT format:
Front: "Hello"
Back: "Dia dhuit"

Front: "Cat"
Back: "Gato"

Front: "How are you?"
Back: "¿Cómo estás?"

DO NOT include explanations, pronunciation guides, usage notes, or extra context on the back of cards.
Keep answers simple and direct - just the translation or definition itself.

Respond with JSON: {{"cards": [{{"front": "...", "back": "..."}}]}}
Generate exactly {count} flashcards based on the topic and context provided above."""

EDUCATIONAL_PROMPT = """Generate {count} flashcards for "{topic}"{context}.

FORMAT REQUIREMENTS:
- front: A clear, concise question, term, or prompt
- back: A direct, concise answer - DO NOT repeat the question or add unnecessary context

IMPORTANT: Keep answers brief and to the point. Do not include full sentences that repeat information from the front.

Examples:
Front: "France"
Back: "Paris"

Front: "What is the capital of France"
Back: "Paris"

Front: "Photosynthesis"
Back: "Process by which plants convert light energy into chemical energy"

Make the flashcards educational, accurate, and appropriate for self-study.

Respond with JSON: {{"cards": [{{"front": "...", "back": "..."}}]}}
Generate exactly {count} flashcards based on the topic and context provided above."""


def is_language_learning(topic: str, description: Optional[str] = None) -> bool:
    """Whether a deck's topic or description signals language learning."""
    text = f"{topic} {description or ''}".lower()
    return any(pattern in text for pattern in LANGUAGE_LEARNING_PATTERNS)


def build_prompt(topic: str, description: Optional[str] = None) -> str:
    """Build the user prompt for a deck's topic and description."""
    template = LANGUAGE_LEARNING_PROMPT if is_language_learning(topic, description) else EDUCATIONAL_PROMPT
    context = f". Context: {description}" if description else ""
    return template.format(count=CARDS_PER_GENERATION, topic=topic, context=context)

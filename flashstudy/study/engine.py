"""
Study session engine - a finite-state controller over an ordered card list.

A session is an immutable SessionState value. Every operation is a pure
function that takes a state and returns the next one, so a host can keep
exactly one reference, replace it after each input event, and re-render.

Lifecycle:
- start_session: source order, first card, front showing
- flip / go_to / next_card / previous_card: navigation
- grade: records at most one verdict per position, then advances
- restart / shuffle: the only ways out of the completed state
"""

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Hashable, Optional, Sequence, Tuple


class Verdict(str, Enum):
    """Grading outcome for a card position."""
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class StudyCard:
    """A card as supplied by the card source. Never changed during a session."""
    id: Hashable
    front: str
    back: str


@dataclass(frozen=True)
class SessionState:
    """Complete state of one study pass."""
    order: Tuple[StudyCard, ...] = ()
    position: int = 0
    revealed: bool = False
    visited: FrozenSet[int] = field(default_factory=frozenset)
    graded: FrozenSet[int] = field(default_factory=frozenset)
    correct_count: int = 0
    incorrect_count: int = 0
    complete: bool = False

    @property
    def total_cards(self) -> int:
        return len(self.order)

    @property
    def disabled(self) -> bool:
        """True for a session started without cards; every operation is a no-op."""
        return not self.order

    @property
    def last_position(self) -> int:
        return len(self.order) - 1

    @property
    def current_card(self) -> Optional[StudyCard]:
        if self.disabled:
            return None
        return self.order[self.position]

    @property
    def answered(self) -> bool:
        """Whether the current position already has a verdict."""
        return self.position in self.graded

    @property
    def graded_total(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def progress_percent(self) -> int:
        if self.disabled:
            return 0
        return round_percent(self.position + 1, len(self.order))

    @property
    def accuracy_percent(self) -> int:
        """Share of correct verdicts; 0 until something has been graded."""
        if self.graded_total == 0:
            return 0
        return round_percent(self.correct_count, self.graded_total)


def round_percent(numerator: int, denominator: int) -> int:
    """
    Integer percentage rounded half up.

    Python's round() rounds half to even (12.5 -> 12); the study UI has
    always shown 13 for 1 out of 8.
    """
    return (200 * numerator + denominator) // (2 * denominator)


def _initial(order: Tuple[StudyCard, ...]) -> SessionState:
    if not order:
        return SessionState()
    return SessionState(order=order, visited=frozenset({0}))


def start_session(cards: Sequence[StudyCard]) -> SessionState:
    """
    Open a session over cards in source order.

    Callers must check for an empty list before starting a session. Given
    no cards this returns a disabled state rather than raising.
    """
    return _initial(tuple(cards))


# ═══════════════════════════════════════════════════════════════════════════
# NAVIGATION
# ═══════════════════════════════════════════════════════════════════════════


def flip(state: SessionState) -> SessionState:
    """Toggle between the front and the back of the current card."""
    if state.disabled:
        return state
    return replace(state, revealed=not state.revealed)


def go_to(state: SessionState, target: int) -> SessionState:
    """
    Move to a position.

    Out-of-range targets are clamped to the nearest bound. Moving to the
    current position changes nothing (the card is not flipped back).
    """
    if state.disabled or state.complete:
        return state
    target = max(0, min(target, state.last_position))
    if target == state.position:
        return state
    return replace(
        state,
        position=target,
        revealed=False,
        visited=state.visited | {target},
    )


def next_card(state: SessionState) -> SessionState:
    """Advance one card. Stays put on the last card."""
    return go_to(state, state.position + 1)


def previous_card(state: SessionState) -> SessionState:
    """Go back one card. Stays put on the first card."""
    return go_to(state, state.position - 1)


# ═══════════════════════════════════════════════════════════════════════════
# GRADING
# ═══════════════════════════════════════════════════════════════════════════


def grade(state: SessionState, verdict: Verdict) -> SessionState:
    """
    Record a verdict for the current card and advance.

    Only the first verdict for a position counts; grading an answered card
    again just advances. The session completes when the last position
    receives its first verdict.

    Args:
        state: Current session state
        verdict: CORRECT or INCORRECT

    Returns:
        New session state
    """
    if state.disabled or state.complete:
        return state

    position = state.position
    if position not in state.graded:
        is_correct = verdict == Verdict.CORRECT
        state = replace(
            state,
            graded=state.graded | {position},
            visited=state.visited | {position},
            correct_count=state.correct_count + (1 if is_correct else 0),
            incorrect_count=state.incorrect_count + (0 if is_correct else 1),
            complete=position == state.last_position,
        )

    return next_card(state)


# ═══════════════════════════════════════════════════════════════════════════
# RESET
# ═══════════════════════════════════════════════════════════════════════════


def restart(state: SessionState) -> SessionState:
    """Start over with the same card order."""
    return _initial(state.order)


def shuffle(
    state: SessionState,
    cards: Sequence[StudyCard],
    rng: Optional[random.Random] = None,
) -> SessionState:
    """
    Start over with a fresh random order of cards.

    random.Random.shuffle is a Fisher-Yates shuffle, so every permutation
    is equally likely.

    Args:
        state: Current session state (discarded)
        cards: The card source's list
        rng: Random generator, module-level one by default

    Returns:
        New session state at the first card of the new order
    """
    order = list(cards)
    (rng or random).shuffle(order)
    return _initial(tuple(order))

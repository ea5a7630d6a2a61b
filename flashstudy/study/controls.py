"""
Input channels for a study session.

Buttons and keyboard shortcuts both end up in apply_action, the single
table mapping an action to its engine transition. Neither channel keeps
its own copy of the grading or navigation logic.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence

from flashstudy.study import engine
from flashstudy.study.engine import SessionState, StudyCard, Verdict

logger = logging.getLogger(__name__)


class StudyAction(str, Enum):
    """Logical actions a user can take during a session."""
    FLIP = "flip"
    NEXT = "next"
    PREVIOUS = "previous"
    GO_TO = "go_to"
    GRADE_CORRECT = "grade_correct"
    GRADE_INCORRECT = "grade_incorrect"
    RESTART = "restart"
    SHUFFLE = "shuffle"


GRADE_ACTIONS = frozenset({StudyAction.GRADE_CORRECT, StudyAction.GRADE_INCORRECT})

# Key names follow KeyboardEvent.key
DEFAULT_KEY_BINDINGS: Dict[str, StudyAction] = {
    " ": StudyAction.FLIP,
    "Enter": StudyAction.FLIP,
    "ArrowRight": StudyAction.NEXT,
    "ArrowLeft": StudyAction.PREVIOUS,
    "y": StudyAction.GRADE_CORRECT,
    "Y": StudyAction.GRADE_CORRECT,
    "n": StudyAction.GRADE_INCORRECT,
    "N": StudyAction.GRADE_INCORRECT,
}


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of one input event."""
    state: SessionState
    handled: bool = True
    completed: bool = False


def apply_action(
    state: SessionState,
    action: StudyAction,
    *,
    target: Optional[int] = None,
    cards: Optional[Sequence[StudyCard]] = None,
    rng: Optional[random.Random] = None,
) -> SessionState:
    """
    Run the engine transition for an action.

    Args:
        state: Current session state
        action: Action to perform
        target: Position for GO_TO (ignored otherwise)
        cards: Source card list for SHUFFLE; the current order when omitted
        rng: Random generator for SHUFFLE

    Returns:
        New session state
    """
    if action == StudyAction.FLIP:
        return engine.flip(state)
    if action == StudyAction.NEXT:
        return engine.next_card(state)
    if action == StudyAction.PREVIOUS:
        return engine.previous_card(state)
    if action == StudyAction.GO_TO:
        return engine.go_to(state, state.position if target is None else target)
    if action == StudyAction.GRADE_CORRECT:
        return engine.grade(state, Verdict.CORRECT)
    if action == StudyAction.GRADE_INCORRECT:
        return engine.grade(state, Verdict.INCORRECT)
    if action == StudyAction.RESTART:
        return engine.restart(state)
    if action == StudyAction.SHUFFLE:
        return engine.shuffle(state, state.order if cards is None else cards, rng=rng)
    raise ValueError(f"Unknown study action: {action!r}")


def _result(before: SessionState, after: SessionState) -> TransitionResult:
    return TransitionResult(
        state=after,
        handled=True,
        completed=after.complete and not before.complete,
    )


def handle_pointer(
    state: SessionState,
    action: StudyAction,
    *,
    target: Optional[int] = None,
    cards: Optional[Sequence[StudyCard]] = None,
    rng: Optional[random.Random] = None,
) -> TransitionResult:
    """Handle a button or card click."""
    after = apply_action(state, action, target=target, cards=cards, rng=rng)
    return _result(state, after)


def handle_key(
    state: SessionState,
    key: str,
    *,
    suppressed: bool = False,
    bindings: Mapping[str, StudyAction] = DEFAULT_KEY_BINDINGS,
) -> TransitionResult:
    """
    Handle a key press.

    Keys are ignored (handled=False, state unchanged) when the host reports
    focus in a text field, when the key is unbound, and for grading keys
    while the front of the card is showing.

    Args:
        state: Current session state
        key: KeyboardEvent.key value
        suppressed: True while a text-entry field has focus
        bindings: Key to action mapping

    Returns:
        TransitionResult; hosts should only cancel the browser default
        when handled is True
    """
    if suppressed:
        return TransitionResult(state=state, handled=False)

    action = bindings.get(key)
    if action is None:
        return TransitionResult(state=state, handled=False)

    if action in GRADE_ACTIONS and not state.revealed:
        logger.debug(f"[StudyControls] Ignoring {action.value}: card not flipped")
        return TransitionResult(state=state, handled=False)

    after = apply_action(state, action)
    return _result(state, after)

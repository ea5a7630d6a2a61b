"""
Tests for study input channels (buttons and keyboard).
"""

import random

import pytest

from flashstudy.study.controls import (
    DEFAULT_KEY_BINDINGS,
    StudyAction,
    apply_action,
    handle_key,
    handle_pointer,
)
from flashstudy.study.engine import Verdict, go_to, grade, start_session


class TestKeyboard:

    def test_grade_key_ignored_while_front_showing(self, cards):
        state = start_session(cards)
        result = handle_key(state, "y")

        assert result.handled is False
        assert result.state is state

    def test_flip_then_grade_key_records_and_advances(self, cards):
        state = handle_key(start_session(cards), " ").state
        assert state.revealed is True

        result = handle_key(state, "y")
        assert result.handled is True
        assert result.state.correct_count == 1
        assert result.state.position == 1
        assert result.state.revealed is False

    @pytest.mark.parametrize("key", ["n", "N"])
    def test_incorrect_keys(self, cards, key):
        state = handle_key(start_session(cards), "Enter").state
        assert handle_key(state, key).state.incorrect_count == 1

    def test_arrow_keys_navigate(self, cards):
        state = handle_key(start_session(cards), "ArrowRight").state
        assert state.position == 1
        state = handle_key(state, "ArrowLeft").state
        assert state.position == 0

    def test_suppressed_ignores_every_key(self, cards):
        state = handle_key(start_session(cards), " ").state
        for key in DEFAULT_KEY_BINDINGS:
            result = handle_key(state, key, suppressed=True)
            assert result.handled is False
            assert result.state is state

    def test_unknown_key_is_ignored(self, cards):
        state = start_session(cards)
        result = handle_key(state, "q")
        assert result.handled is False
        assert result.state is state

    def test_custom_bindings(self, cards):
        bindings = {"j": StudyAction.NEXT}
        state = start_session(cards)
        assert handle_key(state, "j", bindings=bindings).state.position == 1
        assert handle_key(state, "ArrowRight", bindings=bindings).handled is False

    def test_regrade_key_just_navigates(self, cards):
        state = grade(start_session(cards), Verdict.CORRECT)
        state = handle_key(state, "ArrowLeft").state
        state = handle_key(state, " ").state

        result = handle_key(state, "n")
        assert result.handled is True
        assert result.state.incorrect_count == 0
        assert result.state.correct_count == 1
        assert result.state.position == 1


class TestPointer:

    def test_grade_button_works_without_flip(self, cards):
        result = handle_pointer(start_session(cards), StudyAction.GRADE_INCORRECT)
        assert result.state.incorrect_count == 1

    def test_go_to_uses_target(self, cards):
        result = handle_pointer(start_session(cards), StudyAction.GO_TO, target=2)
        assert result.state.position == 2

    def test_shuffle_uses_source_cards(self, cards):
        state = start_session(cards[:1])
        result = handle_pointer(state, StudyAction.SHUFFLE, cards=cards, rng=random.Random(2))
        assert len(result.state.order) == 3


class TestSingleTransitionTable:

    @pytest.mark.parametrize("key, action", [
        (" ", StudyAction.FLIP),
        ("ArrowRight", StudyAction.NEXT),
        ("ArrowLeft", StudyAction.PREVIOUS),
        ("y", StudyAction.GRADE_CORRECT),
        ("n", StudyAction.GRADE_INCORRECT),
    ])
    def test_key_and_button_reach_same_state(self, cards, key, action):
        state = handle_pointer(go_to(start_session(cards), 1), StudyAction.FLIP).state

        assert handle_key(state, key).state == handle_pointer(state, action).state

    def test_every_action_is_dispatched(self, cards):
        state = start_session(cards)
        for action in StudyAction:
            apply_action(state, action, target=1, cards=cards)


class TestCompletionSignal:

    def test_completed_fires_once_when_channels_race(self, cards):
        state = go_to(start_session(cards), 2)
        state = handle_key(state, " ").state

        first = handle_key(state, "y")
        second = handle_pointer(first.state, StudyAction.GRADE_INCORRECT)
        third = handle_key(second.state, "n")

        assert first.completed is True
        assert second.completed is False
        assert third.completed is False
        assert second.state.correct_count == 1
        assert second.state.incorrect_count == 0

    def test_completed_not_set_on_navigation(self, cards):
        result = handle_pointer(start_session(cards), StudyAction.GO_TO, target=2)
        assert result.completed is False

    def test_completed_again_after_restart(self, cards):
        state = go_to(start_session(cards), 2)
        done = handle_pointer(state, StudyAction.GRADE_CORRECT)
        assert done.completed

        again = handle_pointer(done.state, StudyAction.RESTART)
        again = handle_pointer(again.state, StudyAction.GO_TO, target=2)
        assert handle_pointer(again.state, StudyAction.GRADE_CORRECT).completed

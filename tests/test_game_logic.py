import math
import random
import threading

import pytest

from guessgame.engine.contracts import Feedback, SearchState
from guessgame.engine.game_logic import GameLogic, INVALID_GUESS


def answer(guess, target):
    if guess > target:
        return "lower"
    if guess < target:
        return "higher"
    return "stop"


def play(logic, target, max_steps=20):
    """Answer truthfully until "stop"; returns the number of narrowing steps."""
    steps = 0
    while steps < max_steps:
        label = answer(logic.guess, target)
        if label == "stop":
            return steps
        logic.interpret_feedback(label)
        steps += 1
    return steps


def test_initial_state(logic):
    assert logic.state == SearchState(left=0, right=100, guess=50)
    assert not logic.exhausted


def test_too_high_then_too_low_then_stop(logic):
    assert logic.interpret_feedback("lower") == 25
    assert logic.state == SearchState(0, 50, 25)

    assert logic.interpret_feedback("higher") == 37
    assert logic.state == SearchState(25, 50, 37)

    assert logic.interpret_feedback("stop") == 37
    assert logic.state == SearchState(25, 50, 37)


def test_unrecognized_label_leaves_state(logic):
    assert logic.interpret_feedback("banana") == INVALID_GUESS
    assert logic.state == SearchState(0, 100, 50)


@pytest.mark.parametrize("label", ["", "maybe", None, "  ", "higher!"])
def test_invalid_input_returns_sentinel(logic, label):
    logic.interpret_feedback("lower")
    before = logic.state
    assert logic.interpret_feedback(label) == -1
    assert logic.state == before


def test_stop_is_idempotent(logic):
    logic.interpret_feedback("higher")
    before = logic.state
    for _ in range(5):
        assert logic.interpret_feedback("stop") == before.guess
    assert logic.state == before


def test_labels_are_case_insensitive_by_default(logic):
    assert logic.interpret_feedback(" LOWER ") == 25
    assert logic.is_guess_correct("Stop")


def test_case_sensitive_policy():
    logic = GameLogic(case_sensitive=True)
    assert logic.interpret_feedback("Lower") == -1
    assert logic.state == SearchState(0, 100, 50)
    assert logic.interpret_feedback("lower") == 25


def test_is_guess_correct_does_not_mutate(logic):
    assert logic.is_guess_correct("stop")
    assert not logic.is_guess_correct("higher")
    assert not logic.is_guess_correct(None)
    assert logic.state == SearchState(0, 100, 50)


def test_apply_dispatches_on_feedback(logic):
    assert logic.apply(Feedback.TOO_LOW) == 75
    assert logic.apply(Feedback.TOO_HIGH) == 62
    assert logic.apply(Feedback.CORRECT) == 62
    assert logic.apply(Feedback.UNRECOGNIZED) == -1
    assert logic.state == SearchState(50, 75, 62)


def test_narrow_steps_directly(logic):
    assert logic.narrow_lower() == 75
    assert (logic.left, logic.right) == (50, 100)
    assert logic.narrow_upper() == 62
    assert (logic.left, logic.right) == (50, 75)
    assert logic.confirm_correct() == 62


@pytest.mark.parametrize("labels", [
    [],
    ["stop"],
    ["lower"] * 10,
    ["higher"] * 10,
    ["higher", "lower", "higher", "stop", "banana"],
])
def test_reset_restores_start(logic, labels):
    for label in labels:
        logic.interpret_feedback(label)
    logic.reset()
    assert logic.state == SearchState(0, 100, 50)


def test_invariants_hold_for_random_sequences():
    rng = random.Random(7)
    logic = GameLogic()
    for _ in range(200):
        logic.reset()
        for _ in range(rng.randint(1, 15)):
            before = logic.state
            label = rng.choice(["higher", "lower", "stop", "nope"])
            logic.interpret_feedback(label)
            after = logic.state

            assert 0 <= after.left <= after.guess <= after.right <= 100
            assert after.guess == (after.left + after.right) // 2
            if label == "lower":
                assert after.right < before.right or after.right == after.left
                assert after.left == before.left
            elif label == "higher":
                assert after.left > before.left or before.right - before.left <= 1
                assert after.right == before.right
            else:
                assert after == before


@pytest.mark.parametrize("target", range(0, 100))
def test_converges_on_every_reachable_target(target):
    logic = GameLogic()
    steps = play(logic, target)
    assert logic.guess == target
    assert steps <= math.ceil(math.log2(101))


def test_upper_bound_stalls_with_hold_policy(logic):
    seen = [logic.interpret_feedback("higher") for _ in range(8)]
    assert seen[-3:] == [99, 99, 99]
    assert logic.exhausted
    assert logic.state == SearchState(99, 100, 99)


@pytest.mark.parametrize("target", [0, 1, 37, 98, 99, 100])
def test_advance_policy_reaches_upper_bound(target):
    logic = GameLogic(exhaustion="advance")
    steps = play(logic, target)
    assert logic.guess == target
    assert steps <= math.ceil(math.log2(101))
    assert logic.left <= logic.guess <= logic.right


def test_lower_bound_reaches_zero(logic):
    assert [logic.interpret_feedback("lower") for _ in range(7)] == [25, 12, 6, 3, 1, 0, 0]
    assert logic.state == SearchState(0, 0, 0)


def test_custom_range():
    logic = GameLogic(low=1, high=10)
    assert logic.guess == 5
    assert logic.interpret_feedback("higher") == 7


def test_rejects_bad_config():
    with pytest.raises(ValueError):
        GameLogic(low=10, high=0)
    with pytest.raises(ValueError):
        GameLogic(exhaustion="wrap")


def test_concurrent_feedback_keeps_invariants():
    logic = GameLogic()

    def worker(label):
        for _ in range(200):
            logic.interpret_feedback(label)
            st = logic.state
            assert st.left <= st.guess <= st.right

    threads = [threading.Thread(target=worker, args=(l,)) for l in ("higher", "lower", "stop")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    st = logic.state
    assert 0 <= st.left <= st.guess <= st.right <= 100
    assert st.guess == (st.left + st.right) // 2

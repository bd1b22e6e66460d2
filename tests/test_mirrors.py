import pytest

from tripspotter.mirrors import (
    ATTEMPT_FAILED,
    ATTEMPT_OK,
    FAILED_ALL,
    PENDING,
    START,
    SUCCEEDED,
    TRYING,
    initial_state,
    transition,
)

MIRRORS = ["https://a.example/api", "https://b.example/api", "https://c.example/api"]


def test_start_tries_first_mirror():
    state = transition(initial_state(3), START)
    assert state.phase == TRYING
    assert state.current_mirror(MIRRORS) == MIRRORS[0]


def test_failures_advance_in_order_then_fail_all():
    state = transition(initial_state(3), START)
    seen = []
    while state.phase == TRYING:
        seen.append(state.current_mirror(MIRRORS))
        state = transition(state, ATTEMPT_FAILED)
    assert seen == MIRRORS
    assert state.phase == FAILED_ALL
    assert state.done
    assert state.current_mirror(MIRRORS) is None


def test_success_stops_on_current_mirror():
    state = transition(initial_state(3), START)
    state = transition(state, ATTEMPT_FAILED)
    state = transition(state, ATTEMPT_OK)
    assert state.phase == SUCCEEDED
    assert state.current_mirror(MIRRORS) == MIRRORS[1]


def test_no_mirrors_fails_immediately():
    state = transition(initial_state(0), START)
    assert state.phase == FAILED_ALL


def test_invalid_transitions_raise():
    assert initial_state(2).phase == PENDING
    with pytest.raises(ValueError):
        transition(initial_state(2), ATTEMPT_OK)
    done = transition(transition(initial_state(1), START), ATTEMPT_OK)
    with pytest.raises(ValueError):
        transition(done, ATTEMPT_FAILED)
    with pytest.raises(ValueError):
        transition(transition(initial_state(1), START), START)

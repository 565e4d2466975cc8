"""Test the model state machine."""
import pytest

from core.business.errors import ModelStateError
from patterns.workflow_states import ModelState, ModelStateMachine


def test_created_is_new():
    sm = ModelStateMachine(ModelState.CREATED)
    assert sm.is_new
    assert sm.is_dirty


def test_fetched_is_not_new():
    sm = ModelStateMachine()
    assert sm.current_state is ModelState.PRISTINE
    assert not sm.is_new
    assert not sm.is_dirty


def test_created_stays_new_until_saved():
    sm = ModelStateMachine(ModelState.CREATED)
    sm.transition(ModelState.CHANGED)
    assert sm.is_new
    sm.transition(ModelState.PRISTINE)
    assert not sm.is_new
    assert sm.history == [ModelState.CREATED, ModelState.CHANGED]


def test_removal():
    sm = ModelStateMachine()
    sm.transition(ModelState.MARKED_FOR_REMOVAL)
    sm.transition(ModelState.REMOVED)
    assert sm.is_terminal


def test_created_cannot_be_removed():
    sm = ModelStateMachine(ModelState.CREATED)
    assert not sm.can_transition(ModelState.MARKED_FOR_REMOVAL)
    with pytest.raises(ModelStateError) as exc_info:
        sm.transition(ModelState.MARKED_FOR_REMOVAL)
    assert exc_info.value.allowed == ["changed", "pristine"]


def test_removed_is_terminal():
    sm = ModelStateMachine(ModelState.REMOVED)
    with pytest.raises(ModelStateError):
        sm.transition(ModelState.PRISTINE)

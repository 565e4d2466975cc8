"""Enum-based model state machine.

Business objects move through a small lifecycle: a blank instance is
*created*, a fetched one starts *pristine*, either becomes *changed* after
deserialization, and an existing instance can be *marked for removal* and
finally *removed*. The allowed moves live in one transition table so that
every model type shares the same rules.
"""

from dataclasses import dataclass, field
from enum import Enum

from core.business.errors import ModelStateError


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class ModelState(str, Enum):
    """Lifecycle states of a business object."""

    PRISTINE = "pristine"
    CREATED = "created"
    CHANGED = "changed"
    MARKED_FOR_REMOVAL = "marked_for_removal"
    REMOVED = "removed"


# ---------------------------------------------------------------------------
# Transition rules
# ---------------------------------------------------------------------------

# Allowed transitions: {current_state: [allowed_next_states]}
_MODEL_TRANSITIONS: dict[ModelState, list[ModelState]] = {
    ModelState.PRISTINE: [
        ModelState.PRISTINE,
        ModelState.CHANGED,
        ModelState.MARKED_FOR_REMOVAL,
    ],
    ModelState.CREATED: [ModelState.CHANGED, ModelState.PRISTINE],
    ModelState.CHANGED: [
        ModelState.CHANGED,
        ModelState.PRISTINE,
        ModelState.MARKED_FOR_REMOVAL,
    ],
    ModelState.MARKED_FOR_REMOVAL: [ModelState.REMOVED],
    ModelState.REMOVED: [],  # terminal
}


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

@dataclass
class ModelStateMachine:
    """State tracking for one business object instance.

    Usage::

        sm = ModelStateMachine(ModelState.CREATED)
        sm.transition(ModelState.CHANGED)
        sm.is_new  # True, the instance will be inserted on save
    """

    current_state: ModelState = ModelState.PRISTINE
    is_new: bool = False
    history: list[ModelState] = field(default_factory=list)

    def __post_init__(self):
        if self.current_state is ModelState.CREATED:
            self.is_new = True

    def can_transition(self, to_state: ModelState) -> bool:
        """Check if a transition is allowed from the current state."""
        allowed = _MODEL_TRANSITIONS.get(self.current_state, [])
        return to_state in allowed

    def transition(self, to_state: ModelState) -> ModelState:
        """Move to ``to_state``.

        Raises ModelStateError if the transition is not allowed.
        """
        if not self.can_transition(to_state):
            allowed = _MODEL_TRANSITIONS.get(self.current_state, [])
            raise ModelStateError(
                self.current_state.value,
                to_state.value,
                [s.value for s in allowed],
            )

        self.history.append(self.current_state)
        self.current_state = to_state
        if to_state is ModelState.PRISTINE:
            self.is_new = False
        return to_state

    @property
    def is_dirty(self) -> bool:
        """True when a save would write something."""
        return self.current_state in (
            ModelState.CREATED,
            ModelState.CHANGED,
            ModelState.MARKED_FOR_REMOVAL,
        )

    @property
    def is_terminal(self) -> bool:
        return len(_MODEL_TRANSITIONS.get(self.current_state, [])) == 0

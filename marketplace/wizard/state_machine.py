"""
Finite state machine for the booking wizard.

Three forward steps (schedule, details, confirmed) plus a not-found state
that is only reachable when the wizard is opened for an unknown service.
Every transition is declared in a table; anything else is rejected.

Usage:
    sm = WizardStateMachine()
    sm.transition(WizardTrigger.SCHEDULE_SELECTED)
    assert sm.current_state == WizardState.ENTERING_DETAILS
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class WizardState(str, Enum):
    """All states of a booking wizard session."""
    SELECTING_SCHEDULE = "selecting_schedule"
    ENTERING_DETAILS = "entering_details"
    CONFIRMED = "confirmed"
    NOT_FOUND = "not_found"


class WizardTrigger(str, Enum):
    """Events that cause state transitions."""
    SCHEDULE_SELECTED = "schedule_selected"
    BACK = "back"
    BOOKING_CREATED = "booking_created"


TERMINAL_STATES = frozenset({WizardState.CONFIRMED, WizardState.NOT_FOUND})

STEP_NUMBERS: dict[WizardState, int] = {
    WizardState.SELECTING_SCHEDULE: 1,
    WizardState.ENTERING_DETAILS: 2,
    WizardState.CONFIRMED: 3,
}


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: WizardState
    to_state: WizardState
    trigger: WizardTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: WizardState
    entered_at: datetime
    trigger: Optional[WizardTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class WizardStateMachine:
    """
    Strictly sequential step control for one booking.

    Guards let the owning wizard block a transition until the current
    step's fields validate.
    """

    TRANSITIONS: list[Transition] = [
        Transition(WizardState.SELECTING_SCHEDULE, WizardState.ENTERING_DETAILS,
                   WizardTrigger.SCHEDULE_SELECTED),
        Transition(WizardState.ENTERING_DETAILS, WizardState.SELECTING_SCHEDULE,
                   WizardTrigger.BACK),
        Transition(WizardState.ENTERING_DETAILS, WizardState.CONFIRMED,
                   WizardTrigger.BOOKING_CREATED),
    ]

    def __init__(
        self,
        initial_state: WizardState = WizardState.SELECTING_SCHEDULE,
        guards: Optional[dict[WizardTrigger, Callable[[], bool]]] = None,
    ) -> None:
        if initial_state not in (WizardState.SELECTING_SCHEDULE, WizardState.NOT_FOUND):
            raise ValueError(f"A wizard cannot start in '{initial_state.value}'")
        self._current_state = initial_state
        self._guards = dict(guards or {})
        self._history: list[StateEntry] = [
            StateEntry(state=initial_state, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> WizardState:
        return self._current_state

    @property
    def step(self) -> Optional[int]:
        """1-based step number shown in the progress header, None when not found."""
        return STEP_NUMBERS.get(self._current_state)

    def can_transition(self, trigger: WizardTrigger) -> bool:
        """Check whether a trigger is defined from here and its guard passes."""
        guard = self._guards.get(trigger)
        return any(
            t.from_state == self._current_state and t.trigger == trigger
            for t in self.TRANSITIONS
        ) and (guard is None or guard())

    def transition(self, trigger: WizardTrigger) -> WizardState:
        """
        Execute a state transition.

        Raises:
            InvalidTransitionError: If no valid transition exists or its guard fails.
        """
        for t in self.TRANSITIONS:
            if t.from_state != self._current_state or t.trigger != trigger:
                continue
            guard = self._guards.get(trigger)
            if guard is not None and not guard():
                raise InvalidTransitionError(
                    f"Cannot '{trigger.value}' from '{self._current_state.value}' yet"
                )

            old_state = self._current_state
            self._current_state = t.to_state
            self._history.append(StateEntry(
                state=self._current_state,
                entered_at=datetime.now(timezone.utc),
                trigger=trigger,
            ))
            logger.debug(
                "Wizard transition: %s -> %s (trigger: %s)",
                old_state.value, self._current_state.value, trigger.value,
            )
            return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[WizardTrigger]:
        """Return all triggers defined from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state in TERMINAL_STATES

from marketplace.wizard.booking_wizard import BookingWizard, WizardClosedError
from marketplace.wizard.field_manager import FieldManager, FieldStatus
from marketplace.wizard.state_machine import (
    InvalidTransitionError,
    WizardState,
    WizardStateMachine,
    WizardTrigger,
)

__all__ = [
    "BookingWizard",
    "WizardClosedError",
    "WizardStateMachine",
    "WizardState",
    "WizardTrigger",
    "InvalidTransitionError",
    "FieldManager",
    "FieldStatus",
]

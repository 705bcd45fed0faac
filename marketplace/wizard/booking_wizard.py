"""
Booking wizard: schedule -> details -> confirmed.

Combines the step state machine with the field manager and owns the
booking draft. The wizard itself does no I/O; the wizard screen submits
the request and hands the backend's record back via ``confirm``.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from marketplace.logging_context import get_session_logger
from marketplace.schemas.booking_schema import BookingDraft, BookingRecord, BookingRequest
from marketplace.schemas.catalog_schema import Service
from marketplace.tools.availability import bookable_dates, default_time_slots, is_selectable_date
from marketplace.tools.services import find_service
from marketplace.wizard.field_manager import FieldManager, ValidationContext, parse_date
from marketplace.wizard.state_machine import (
    InvalidTransitionError,
    WizardState,
    WizardStateMachine,
    WizardTrigger,
)

logger = get_session_logger(__name__)

SCHEDULE_STEP = 1
DETAILS_STEP = 2
RECOVERY_PATH = "/services"


class WizardClosedError(Exception):
    """Raised when editing a wizard that is confirmed or was opened for an unknown service."""


class BookingWizard:
    """One booking session for one service."""

    def __init__(
        self,
        service_id: str,
        service: Optional[Service],
        today: Optional[date] = None,
        time_slots: Optional[list[str]] = None,
    ) -> None:
        self.service_id = service_id
        self.service = service
        self.today = today or date.today()
        self.time_slots = list(time_slots) if time_slots is not None else default_time_slots()
        self._fields = FieldManager(ValidationContext(today=self.today, time_slots=self.time_slots))
        self._draft = BookingDraft(service_id=service_id)
        self._sm = WizardStateMachine(
            initial_state=(
                WizardState.SELECTING_SCHEDULE if service is not None else WizardState.NOT_FOUND
            ),
            guards={
                WizardTrigger.SCHEDULE_SELECTED: lambda: self._fields.is_step_complete(SCHEDULE_STEP),
                WizardTrigger.BOOKING_CREATED: lambda: self._draft.total is not None,
            },
        )
        if service is None:
            logger.info("Booking wizard opened for unknown service %s", service_id)
        else:
            logger.info("Booking wizard opened for %s (%s)", service.name, service_id)

    @classmethod
    def open(
        cls,
        service_id: str,
        catalog: Iterable[Service],
        today: Optional[date] = None,
        time_slots: Optional[list[str]] = None,
    ) -> "BookingWizard":
        """Start a wizard from a loaded catalog; unknown ids land in NOT_FOUND."""
        return cls(service_id, find_service(catalog, service_id), today, time_slots)

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> WizardState:
        return self._sm.current_state

    @property
    def step(self) -> Optional[int]:
        return self._sm.step

    @property
    def is_not_found(self) -> bool:
        return self.state == WizardState.NOT_FOUND

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def booking_id(self) -> Optional[str]:
        return self._draft.booking_id

    @property
    def errors(self) -> dict[str, str]:
        return self._fields.errors()

    def value(self, name: str) -> Optional[str]:
        """Value to show in a form input, valid or not."""
        return self._fields.get_raw(name)

    def get_state_trace(self) -> list[str]:
        return self._sm.get_state_trace()

    def _require_state(self, *states: WizardState) -> None:
        if self.state in (WizardState.CONFIRMED, WizardState.NOT_FOUND):
            raise WizardClosedError(f"Booking wizard is {self.state.value}; start a new booking.")
        if self.state not in states:
            raise InvalidTransitionError(
                f"Not available while {self.state.value}"
            )

    # ------------------------------------------------------------------ #
    # Step 1: schedule
    # ------------------------------------------------------------------ #

    def available_dates(self) -> list[tuple[date, bool]]:
        """Date picker entries as (date, selectable)."""
        return [(day, is_selectable_date(day, self.today)) for day in bookable_dates(self.today)]

    def select_date(self, day: "date | str") -> tuple[bool, str]:
        """Choose the appointment date. Changing the date clears the chosen time."""
        self._require_state(WizardState.SELECTING_SCHEDULE)
        previous = self._fields.get_value("date")
        ok, msg = self._fields.set_field("date", day)
        if ok and previous != self._fields.get_value("date"):
            self._fields.clear_field("time_slot")
        return ok, msg

    def select_time(self, label: str) -> tuple[bool, str]:
        self._require_state(WizardState.SELECTING_SCHEDULE)
        return self._fields.set_field("time_slot", label)

    def can_continue(self) -> bool:
        """The continue button is enabled once both date and time are chosen."""
        return self.state == WizardState.SELECTING_SCHEDULE and self._sm.can_transition(
            WizardTrigger.SCHEDULE_SELECTED
        )

    def continue_to_details(self) -> dict[str, str]:
        """Advance to the details form. Returns field errors; nothing changes on failure."""
        self._require_state(WizardState.SELECTING_SCHEDULE)
        errors = self._fields.validate_step(SCHEDULE_STEP)
        if errors:
            logger.debug("Schedule step incomplete: %s", sorted(errors))
            return errors

        self._sm.transition(WizardTrigger.SCHEDULE_SELECTED)
        self._draft.date = self._fields.get_value("date")
        self._draft.time_slot = self._fields.get_value("time_slot")
        logger.info("Schedule chosen: %s at %s", self._draft.date, self._draft.time_slot)
        return {}

    def back(self) -> WizardState:
        """Return to the schedule step. Every entered value is kept."""
        self._require_state(WizardState.ENTERING_DETAILS)
        return self._sm.transition(WizardTrigger.BACK)

    # ------------------------------------------------------------------ #
    # Step 2: details
    # ------------------------------------------------------------------ #

    def enter_details(
        self, address: str, phone: str, email: str, notes: Optional[str] = None
    ) -> dict[str, str]:
        """Validate the contact form and complete the draft.

        Returns per-field errors. Valid fields are kept even when a sibling
        fails, and the draft is only completed when every field passes.
        """
        self._require_state(WizardState.ENTERING_DETAILS)
        for name, raw in (("address", address), ("phone", phone), ("email", email),
                          ("notes", notes or "")):
            self._fields.set_field(name, raw)

        # Any earlier completed draft is dropped; it is rebuilt only when every field passes.
        self._draft.address = self._draft.phone = self._draft.email = None
        self._draft.notes = None
        self._draft.total = None

        errors = self._fields.validate_step(DETAILS_STEP)
        if errors:
            logger.debug("Details step incomplete: %s", sorted(errors))
            return errors

        self._draft.address = self._fields.get_value("address")
        self._draft.phone = self._fields.get_value("phone")
        self._draft.email = self._fields.get_value("email")
        self._draft.notes = self._fields.get_value("notes")
        self._draft.total = self.service.price
        return {}

    @property
    def ready_to_submit(self) -> bool:
        return (
            self.state == WizardState.ENTERING_DETAILS
            and self._draft.total is not None
            and self._fields.is_step_complete(DETAILS_STEP)
        )

    def build_request(
        self, client_id: Optional[str] = None, provider_id: Optional[str] = None
    ) -> BookingRequest:
        """Creation payload for the backend."""
        self._require_state(WizardState.ENTERING_DETAILS)
        if not self.ready_to_submit:
            raise InvalidTransitionError("Booking details are incomplete")
        return self._draft.to_request(client_id=client_id, provider_id=provider_id)

    # ------------------------------------------------------------------ #
    # Step 3: confirmed
    # ------------------------------------------------------------------ #

    def confirm(self, record: BookingRecord) -> WizardState:
        """Record the backend-assigned booking id and close the wizard."""
        self._require_state(WizardState.ENTERING_DETAILS)
        state = self._sm.transition(WizardTrigger.BOOKING_CREATED)
        self._draft.booking_id = record.id
        logger.info("Booking confirmed: %s", record.id)
        return state

    def scheduled_date(self) -> Optional[date]:
        return parse_date(self._draft.date) if self._draft.date else None

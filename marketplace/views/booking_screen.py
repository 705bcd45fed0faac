"""Booking page: loads the service, runs the wizard, and submits the booking."""

from datetime import date
from typing import Optional

from marketplace.backend.base import Backend
from marketplace.backend.errors import BackendError, NotFoundError
from marketplace.logging_context import get_session_logger
from marketplace.schemas.session_schema import SessionContext
from marketplace.views.base import PageMessage, Screen
from marketplace.wizard.booking_wizard import RECOVERY_PATH, BookingWizard

logger = get_session_logger(__name__)


class BookingWizardScreen(Screen):
    """
    Owns one wizard at a time.

    Closing the screen drops the draft. A submission still in flight when
    the screen closes is not cancelled; its result is logged and ignored.
    """

    recovery_path = RECOVERY_PATH

    def __init__(
        self,
        backend: Backend,
        session: Optional[SessionContext] = None,
        today: Optional[date] = None,
    ) -> None:
        super().__init__(backend)
        self.session = session
        self.today = today
        self.wizard: Optional[BookingWizard] = None
        self.closed = False

    async def open(self, service_id: str) -> Optional[BookingWizard]:
        """Fetch the service and start a fresh wizard for it.

        Returns None when the service could not be loaded; the page message
        says why and the visitor can retry.
        """
        self.closed = False
        with self._busy():
            try:
                service = await self.backend.get_service(service_id)
            except NotFoundError:
                service = None
            except BackendError as exc:
                logger.warning("Could not load service %s: %s", service_id, exc)
                self.message = PageMessage(text=f"Could not load this service. {exc}")
                self.wizard = None
                return None

        self.wizard = BookingWizard(service_id, service, today=self.today)
        return self.wizard

    async def submit(self) -> bool:
        """Send the completed draft. The draft is kept if the backend fails."""
        wizard = self.wizard
        if wizard is None or not wizard.ready_to_submit:
            self._notify("Please complete your booking details first.", level="error")
            return False

        request = wizard.build_request(
            client_id=self.session.user_id if self.session else None,
        )
        ok, record = await self._remote(self.backend.create_booking(request), "create your booking")
        if self.closed or wizard is not self.wizard:
            logger.info("Ignoring booking result for a closed wizard (ok=%s)", ok)
            return False
        if not ok:
            return False

        wizard.confirm(record)
        return True

    def close(self) -> None:
        """Leave the booking page. Nothing of the draft is kept."""
        if self.wizard is not None and not self.wizard.is_not_found:
            logger.info("Booking wizard closed in state %s", self.wizard.state.value)
        self.closed = True
        self.wizard = None

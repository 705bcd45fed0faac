"""Overview cards and upcoming appointments for the admin and provider dashboards."""

from datetime import date
from typing import Optional

from marketplace.backend.base import Backend
from marketplace.logging_context import get_session_logger
from marketplace.schemas.booking_schema import BookingRecord
from marketplace.schemas.session_schema import SessionContext, UserRole
from marketplace.tools.overview import (
    OverviewCalculator,
    OverviewStats,
    bookings_on,
    upcoming_bookings,
)
from marketplace.views.base import Screen

logger = get_session_logger(__name__)


class DashboardScreen(Screen):
    def __init__(
        self, backend: Backend, session: SessionContext, today: Optional[date] = None
    ) -> None:
        super().__init__(backend)
        self.session = session
        self.today = today or date.today()
        self.records: list[BookingRecord] = []
        self.stats = OverviewStats()
        self._calculator = OverviewCalculator()

    async def load(self) -> bool:
        provider_id = self.session.user_id if self.session.role == UserRole.PROVIDER else None
        ok, records = await self._remote(
            self.backend.list_bookings(provider_id=provider_id), "load your dashboard"
        )
        if ok:
            self.records = records
            self.stats = self._calculator.calculate(records)
        return ok

    @property
    def upcoming(self) -> list[BookingRecord]:
        return upcoming_bookings(self.records, self.today)

    @property
    def todays_schedule(self) -> list[BookingRecord]:
        return bookings_on(self.records, self.today)

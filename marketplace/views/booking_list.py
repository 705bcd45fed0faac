"""
Booking tables for the admin and provider dashboards.

Admins see every booking; providers see only their own. Status changes
are applied optimistically, marked pending while the request runs, and
rolled back if the backend refuses or fails.
"""

from typing import Optional

from marketplace.backend.base import Backend
from marketplace.config import settings
from marketplace.logging_context import get_session_logger
from marketplace.schemas.booking_schema import BookingRecord, BookingStatus
from marketplace.schemas.session_schema import SessionContext, UserRole
from marketplace.tools.listing import (
    ALL_STATUSES,
    STATUS_DISPLAY,
    Page,
    StatusAction,
    StatusDisplay,
    available_actions,
    clamp_page,
    filter_bookings,
    page_window,
    paginate,
    parse_status_filter,
    target_status,
    total_pages_for,
)
from marketplace.views.base import Screen, describe

logger = get_session_logger(__name__)


class BookingListScreen(Screen):
    """Search, status filter, pagination and row actions over booking records."""

    def __init__(
        self,
        backend: Backend,
        session: SessionContext,
        page_size: Optional[int] = None,
    ) -> None:
        super().__init__(backend)
        self.session = session
        self.page_size = page_size or settings.listing.bookings_page_size
        self.records: list[BookingRecord] = []
        self.search_term = ""
        self.status_filter: Optional[BookingStatus] = None
        self.page = 1
        self.pending: set[str] = set()

    @property
    def provider_scope(self) -> Optional[str]:
        """Providers only ever list their own bookings."""
        return self.session.user_id if self.session.role == UserRole.PROVIDER else None

    async def load(self) -> bool:
        ok, records = await self._remote(
            self.backend.list_bookings(provider_id=self.provider_scope), "load bookings"
        )
        if ok:
            self.records = records
            self.page = clamp_page(self.page, self._total_pages())
            logger.info("Loaded %d bookings", len(records))
        return ok

    # ------------------------------------------------------------------ #
    # Filtering and paging
    # ------------------------------------------------------------------ #

    def search(self, term: str) -> None:
        self.search_term = term
        self.page = 1

    def set_status_filter(self, status: "BookingStatus | str | None") -> None:
        self.status_filter = parse_status_filter(status)
        self.page = 1

    @property
    def status_filter_value(self) -> str:
        return self.status_filter.value if self.status_filter else ALL_STATUSES

    @property
    def filtered(self) -> list[BookingRecord]:
        return filter_bookings(self.records, self.search_term, self.status_filter_value)

    def _total_pages(self) -> int:
        return total_pages_for(len(self.filtered), self.page_size)

    @property
    def current_page(self) -> Page[BookingRecord]:
        return paginate(self.filtered, self.page, self.page_size)

    def go_to_page(self, page: int) -> Page[BookingRecord]:
        """Jump to a page; out-of-range requests land on the nearest page."""
        self.page = clamp_page(page, self._total_pages())
        return self.current_page

    def next_page(self) -> Page[BookingRecord]:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> Page[BookingRecord]:
        return self.go_to_page(self.page - 1)

    @property
    def pager(self) -> list[int]:
        return page_window(self.page, self._total_pages(), settings.listing.pager_width)

    # ------------------------------------------------------------------ #
    # Row display and actions
    # ------------------------------------------------------------------ #

    @staticmethod
    def status_display(record: BookingRecord) -> StatusDisplay:
        return STATUS_DISPLAY[record.status]

    def actions_for(self, record: BookingRecord) -> list[StatusAction]:
        """Buttons for a row; none while a change for it is in flight."""
        if record.id in self.pending:
            return []
        return available_actions(record.status)

    def _find(self, booking_id: str) -> Optional[int]:
        for index, record in enumerate(self.records):
            if record.id == booking_id:
                return index
        return None

    async def perform(self, booking_id: str, action: "StatusAction | str") -> bool:
        """Apply a status action. Returns True once the backend has accepted it."""
        action = StatusAction(action)
        index = self._find(booking_id)
        if index is None:
            self._notify(f"Booking {booking_id} is no longer listed.", level="error")
            return False
        if booking_id in self.pending:
            return False

        original = self.records[index]
        target = target_status(original.status, action)
        if target is None:
            self._notify(
                f"Cannot {describe(action)} a {describe(original.status)} booking.", level="error"
            )
            return False

        self.records[index] = original.model_copy(update={"status": target})
        self.pending.add(booking_id)
        try:
            ok, updated = await self._remote(
                self.backend.update_booking_status(booking_id, target),
                f"{describe(action)} booking {booking_id}",
            )
        finally:
            self.pending.discard(booking_id)

        index = self._find(booking_id)
        if index is None:
            return ok
        if ok:
            self.records[index] = updated
            logger.info("Booking %s: %s -> %s", booking_id, original.status.value, target.value)
        else:
            self.records[index] = original
            logger.info("Booking %s rolled back to %s", booking_id, original.status.value)
        return ok

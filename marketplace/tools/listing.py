"""
Booking tables shared by the admin and provider dashboards.

Search and status filtering, fixed-size pagination with clamped page
navigation, the status badge mapping, and the forward-only booking
lifecycle that decides which action buttons a row shows.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterable, Optional, Sequence, TypeVar

from marketplace.schemas.booking_schema import BookingRecord, BookingStatus
from marketplace.schemas.session_schema import UserAccount, UserRole

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_STATUSES = "all"


@dataclass(frozen=True)
class StatusDisplay:
    """Badge colour and icon for a booking status."""

    color: str
    icon: str


STATUS_DISPLAY: dict[BookingStatus, StatusDisplay] = {
    BookingStatus.PENDING: StatusDisplay(color="amber", icon="clock"),
    BookingStatus.CONFIRMED: StatusDisplay(color="blue", icon="calendar"),
    BookingStatus.COMPLETED: StatusDisplay(color="green", icon="check"),
    BookingStatus.CANCELLED: StatusDisplay(color="red", icon="cross"),
}


class StatusAction(str, Enum):
    """Status-changing buttons on a booking row."""

    ACCEPT = "accept"
    DECLINE = "decline"
    COMPLETE = "complete"
    CANCEL = "cancel"


ACTION_TARGETS: dict[StatusAction, BookingStatus] = {
    StatusAction.ACCEPT: BookingStatus.CONFIRMED,
    StatusAction.DECLINE: BookingStatus.CANCELLED,
    StatusAction.COMPLETE: BookingStatus.COMPLETED,
    StatusAction.CANCEL: BookingStatus.CANCELLED,
}

# Forward-only lifecycle. Completed and cancelled are terminal.
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

_ROW_ACTIONS: dict[BookingStatus, list[StatusAction]] = {
    BookingStatus.PENDING: [StatusAction.ACCEPT, StatusAction.DECLINE],
    BookingStatus.CONFIRMED: [StatusAction.COMPLETE, StatusAction.CANCEL],
    BookingStatus.COMPLETED: [],
    BookingStatus.CANCELLED: [],
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def target_status(current: BookingStatus, action: StatusAction) -> Optional[BookingStatus]:
    """Status an action leads to from ``current``, or None when not allowed."""
    target = ACTION_TARGETS[action]
    return target if can_transition(current, target) else None


def available_actions(status: BookingStatus) -> list[StatusAction]:
    """Action buttons shown for a booking in the given status."""
    return list(_ROW_ACTIONS[status])


def parse_status_filter(value: "BookingStatus | str | None") -> Optional[BookingStatus]:
    """``"all"`` or empty means no restriction; anything else must be a status."""
    if value is None or value == "" or value == ALL_STATUSES:
        return None
    return BookingStatus(value)


def filter_bookings(
    records: Iterable[BookingRecord],
    search_term: str = "",
    status: "BookingStatus | str | None" = ALL_STATUSES,
) -> list[BookingRecord]:
    """Search booking id, client name and service name, then filter by status."""
    needle = search_term.strip().lower()
    wanted = parse_status_filter(status)
    results = []
    for record in records:
        if wanted is not None and record.status != wanted:
            continue
        if needle and not (
            needle in record.id.lower()
            or needle in record.client_name.lower()
            or needle in record.service_name.lower()
        ):
            continue
        results.append(record)
    return results


def filter_users(
    users: Iterable[UserAccount], search_term: str = "", role: "UserRole | str | None" = "all"
) -> list[UserAccount]:
    """Search user name and email, optionally narrowed to one role."""
    needle = search_term.strip().lower()
    wanted = None if role in (None, "", "all") else UserRole(role)
    return [
        user
        for user in users
        if (wanted is None or user.role == wanted)
        and (not needle or needle in user.name.lower() or needle in user.email.lower())
    ]


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a filtered table."""

    items: list[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def first_index(self) -> int:
        """1-based position of the first row shown, 0 when the table is empty."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        if not self.items:
            return 0
        return self.first_index + len(self.items) - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages_for(total_items: int, page_size: int) -> int:
    """Number of pages, never less than one so an empty table still has page 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(page, 1), total_pages)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` into the requested page. Out-of-range pages are clamped."""
    total = total_pages_for(len(items), page_size)
    current = clamp_page(page, total)
    start = (current - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=current,
        page_size=page_size,
        total_items=len(items),
        total_pages=total,
    )


def page_window(page: int, total_pages: int, width: int = 5) -> list[int]:
    """Page numbers shown in the pager, centred on the current page where possible."""
    if total_pages <= width:
        return list(range(1, total_pages + 1))
    half = width // 2
    if page <= half + 1:
        start = 1
    elif page >= total_pages - half:
        start = total_pages - width + 1
    else:
        start = page - half
    return list(range(start, start + width))

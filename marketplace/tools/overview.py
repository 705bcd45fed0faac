"""
Dashboard statistics for the admin and provider overview screens.

Counts per status, revenue from completed jobs, and the upcoming and
same-day appointment lists, all computed from booking records.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from marketplace.schemas.booking_schema import BookingRecord, BookingStatus
from marketplace.tools.availability import slot_hour

logger = logging.getLogger(__name__)

UPCOMING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass
class OverviewStats:
    """Aggregates shown on a dashboard's stat cards."""

    total_bookings: int = 0
    by_status: dict[BookingStatus, int] = field(
        default_factory=lambda: {status: 0 for status in BookingStatus}
    )
    revenue: Decimal = Decimal("0")
    completion_rate: float = 0.0


class OverviewCalculator:
    """Computes dashboard statistics from booking records."""

    def calculate(self, records: Iterable[BookingRecord]) -> OverviewStats:
        stats = OverviewStats()
        for record in records:
            stats.total_bookings += 1
            stats.by_status[record.status] += 1
            if record.status == BookingStatus.COMPLETED:
                stats.revenue += record.total

        # Only bookings that reached a final state count towards completion.
        closed = stats.by_status[BookingStatus.COMPLETED] + stats.by_status[BookingStatus.CANCELLED]
        stats.completion_rate = stats.by_status[BookingStatus.COMPLETED] / closed if closed else 0.0
        logger.debug("Overview computed over %d bookings", stats.total_bookings)
        return stats


def _chronological(record: BookingRecord) -> tuple[date, int]:
    return record.date, slot_hour(record.time_slot)


def upcoming_bookings(
    records: Iterable[BookingRecord], today: date, limit: int = 5
) -> list[BookingRecord]:
    """Open bookings from today onwards, soonest first."""
    upcoming = [r for r in records if r.status in UPCOMING_STATUSES and r.date >= today]
    return sorted(upcoming, key=_chronological)[:limit]


def bookings_on(records: Iterable[BookingRecord], day: date) -> list[BookingRecord]:
    """A single day's appointments ordered by start time."""
    return sorted((r for r in records if r.date == day), key=_chronological)

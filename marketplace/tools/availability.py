"""
Provider availability and bookable time slots.

The slot grid is a fixed one-hour stride between the configured opening
and closing hours. Providers switch individual slots on and off per
weekday; persistence of those changes is triggered separately by the
schedule editor.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from marketplace.config import settings
from marketplace.schemas.provider_schema import AvailabilityEntry, Weekday

logger = logging.getLogger(__name__)

MIN_HOUR = 0
MAX_HOUR = 23


def generate_time_slots(open_hour: int, close_hour: int) -> list[str]:
    """Return the hourly labels of a working day, e.g. ``["8:00", ..., "17:00"]``.

    The closing hour itself is not bookable. An empty or inverted range
    yields no slots.
    """
    for name, hour in (("open_hour", open_hour), ("close_hour", close_hour)):
        if not MIN_HOUR <= hour <= MAX_HOUR:
            raise ValueError(f"{name} must be between {MIN_HOUR} and {MAX_HOUR}, got {hour}")
    return [f"{hour}:00" for hour in range(open_hour, close_hour)]


def default_time_slots() -> list[str]:
    """Slot grid for the configured operating hours."""
    return generate_time_slots(settings.schedule.opening_hour, settings.schedule.closing_hour)


def slot_hour(label: str) -> int:
    """Hour component of a slot label. Accepts ``9:00``, ``09:00`` or ``09:00:00``."""
    try:
        return int(label.strip().split(":")[0])
    except (ValueError, AttributeError):
        raise ValueError(f"Invalid time label: {label!r}") from None


def normalize_slot_label(label: str) -> str:
    """Canonical ``H:00`` form of a slot label."""
    return f"{slot_hour(label)}:00"


class AvailabilityMap:
    """
    Weekly availability of one provider: weekday -> sorted slot labels.

    Every day's labels stay unique, sorted by hour, and on the slot grid.
    A day is only emptied by removing each of its slots.
    """

    def __init__(self, grid: Optional[list[str]] = None) -> None:
        self._grid: list[str] = list(grid) if grid is not None else default_time_slots()
        self._days: dict[Weekday, list[str]] = {}

    @property
    def grid(self) -> list[str]:
        return list(self._grid)

    def get(self, day: "str | Weekday") -> list[str]:
        """Slots offered on a weekday, empty when none are configured."""
        return list(self._days.get(Weekday.parse(day), []))

    def toggle(self, day: "str | Weekday", time: str) -> list[str]:
        """Add the slot if absent, remove it if present. Returns the day's slots."""
        weekday = Weekday.parse(day)
        label = normalize_slot_label(time)
        if label not in self._grid:
            raise ValueError(f"{time!r} is not a bookable slot")

        slots = self._days.setdefault(weekday, [])
        if label in slots:
            slots.remove(label)
            logger.debug("Slot removed: %s %s", weekday.value, label)
        else:
            slots.append(label)
            slots.sort(key=slot_hour)
            logger.debug("Slot added: %s %s", weekday.value, label)
        if not slots:
            del self._days[weekday]
        return list(slots)

    def contains(self, day: "str | Weekday", time: str) -> bool:
        return normalize_slot_label(time) in self._days.get(Weekday.parse(day), [])

    def days(self) -> list[Weekday]:
        """Configured weekdays in calendar order."""
        return [day for day in Weekday if day in self._days]

    def to_dict(self) -> dict[str, list[str]]:
        """Plain ``{"Monday": ["9:00", ...]}`` mapping for display or export."""
        return {day.value: list(self._days[day]) for day in self.days()}

    def to_entries(self, provider_id: str) -> list[AvailabilityEntry]:
        """Upsert payloads, one per offered slot."""
        return [
            AvailabilityEntry(
                provider_id=provider_id,
                day_of_week=day,
                start_time=label,
                end_time=f"{slot_hour(label) + 1}:00",
            )
            for day in self.days()
            for label in self._days[day]
        ]

    def copy(self) -> "AvailabilityMap":
        clone = AvailabilityMap(self._grid)
        clone._days = {day: list(slots) for day, slots in self._days.items()}
        return clone

    @classmethod
    def from_entries(
        cls, entries: Iterable[AvailabilityEntry], grid: Optional[list[str]] = None
    ) -> "AvailabilityMap":
        """Rebuild a map from stored rows. Rows off the slot grid are skipped."""
        availability = cls(grid)
        for entry in entries:
            label = normalize_slot_label(entry.start_time)
            if label not in availability._grid:
                logger.warning(
                    "Ignoring off-grid availability %s %s", entry.day_of_week.value, entry.start_time
                )
                continue
            if not availability.contains(entry.day_of_week, label):
                availability.toggle(entry.day_of_week, label)
        return availability

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AvailabilityMap):
            return NotImplemented
        return self._days == other._days


def bookable_dates(today: date, days: Optional[int] = None) -> list[date]:
    """Dates shown by the wizard's date picker.

    The window starts on the Monday of the current week, so the first few
    entries may be in the past; use ``is_selectable_date`` to grey them out.
    """
    count = days if days is not None else settings.schedule.booking_window_days
    start = today - timedelta(days=today.weekday())
    return [start + timedelta(days=offset) for offset in range(count)]


def is_selectable_date(day: date, today: date) -> bool:
    """Past dates can never be booked."""
    return day >= today

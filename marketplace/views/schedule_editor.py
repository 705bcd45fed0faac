"""Provider schedule: weekly slot toggles with explicit save."""

from marketplace.backend.base import Backend
from marketplace.logging_context import get_session_logger
from marketplace.schemas.provider_schema import Weekday
from marketplace.tools.availability import AvailabilityMap
from marketplace.views.base import Screen

logger = get_session_logger(__name__)


class ScheduleEditorScreen(Screen):
    """
    Edits one provider's availability in memory.

    Toggles never reach the backend on their own; ``save`` sends the
    difference against the last saved state. Failed saves keep the edits.
    """

    def __init__(self, backend: Backend, provider_id: str) -> None:
        super().__init__(backend)
        self.provider_id = provider_id
        self.availability = AvailabilityMap()
        self._saved = self.availability.copy()

    async def load(self) -> bool:
        ok, entries = await self._remote(
            self.backend.get_availability(self.provider_id), "load your schedule"
        )
        if ok:
            self.availability = AvailabilityMap.from_entries(entries)
            self._saved = self.availability.copy()
        return ok

    def toggle(self, day: "str | Weekday", time: str) -> list[str]:
        return self.availability.toggle(day, time)

    @property
    def dirty(self) -> bool:
        return self.availability != self._saved

    def _diff(self) -> tuple[AvailabilityMap, list[tuple[Weekday, str]]]:
        added = AvailabilityMap(self.availability.grid)
        removed: list[tuple[Weekday, str]] = []
        for day in Weekday:
            current = self.availability.get(day)
            saved = self._saved.get(day)
            for label in current:
                if label not in saved:
                    added.toggle(day, label)
            removed.extend((day, label) for label in saved if label not in current)
        return added, removed

    async def save(self) -> bool:
        """Persist added and removed slots. Nothing is sent when there are no edits."""
        if not self.dirty:
            return True

        added, removed = self._diff()
        entries = added.to_entries(self.provider_id)
        if entries:
            ok, _ = await self._remote(
                self.backend.upsert_availability(entries), "save your schedule"
            )
            if not ok:
                return False
        for day, label in removed:
            ok, _ = await self._remote(
                self.backend.delete_availability(self.provider_id, day, label),
                "save your schedule",
            )
            if not ok:
                return False

        self._saved = self.availability.copy()
        self._notify("Schedule saved.")
        logger.info(
            "Schedule saved for %s: %d added, %d removed",
            self.provider_id, len(entries), len(removed),
        )
        return True

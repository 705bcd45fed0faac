"""Provider profile form: bio, hourly rate and offered categories."""

from decimal import Decimal, InvalidOperation
from typing import Optional

from marketplace.backend.base import Backend
from marketplace.logging_context import get_session_logger
from marketplace.schemas.catalog_schema import ServiceCategory
from marketplace.schemas.provider_schema import ProviderProfile
from marketplace.views.base import Screen

logger = get_session_logger(__name__)

RATE_ERROR = "Hourly rate must be a positive amount."


class ProviderProfileScreen(Screen):
    """
    Edits one provider's public profile.

    Edits are held locally until ``save``; the category selection replaces
    the stored set as a whole. A failed save keeps every edit.
    """

    def __init__(self, backend: Backend, provider_id: str) -> None:
        super().__init__(backend)
        self.provider_id = provider_id
        self.profile: Optional[ProviderProfile] = None
        self.bio = ""
        self.hourly_rate: Optional[Decimal] = None
        self.categories: list[ServiceCategory] = []
        self.rate_error: Optional[str] = None

    async def load(self) -> bool:
        ok, profile = await self._remote(
            self.backend.get_provider(self.provider_id), "load your profile"
        )
        if ok:
            self._reset(profile)
        return ok

    def _reset(self, profile: ProviderProfile) -> None:
        self.profile = profile
        self.bio = profile.bio
        self.hourly_rate = profile.hourly_rate
        self.categories = list(profile.service_categories)
        self.rate_error = None

    def set_bio(self, bio: str) -> None:
        self.bio = bio.strip()

    def set_hourly_rate(self, raw: "str | Decimal") -> tuple[bool, str]:
        try:
            rate = Decimal(str(raw).strip().lstrip("$"))
        except InvalidOperation:
            rate = None
        if rate is None or not rate.is_finite() or rate <= 0:
            self.rate_error = RATE_ERROR
            return False, RATE_ERROR
        self.hourly_rate = rate
        self.rate_error = None
        return True, f"Hourly rate: {rate}"

    def toggle_category(self, category: "str | ServiceCategory") -> list[ServiceCategory]:
        """Add or remove one offered category. Order follows the category list."""
        category = ServiceCategory(category)
        chosen = set(self.categories)
        chosen ^= {category}
        self.categories = [c for c in ServiceCategory if c in chosen]
        return self.categories

    @property
    def dirty(self) -> bool:
        if self.profile is None:
            return False
        return (
            self.bio != self.profile.bio
            or self.hourly_rate != self.profile.hourly_rate
            or set(self.categories) != set(self.profile.service_categories)
        )

    async def save(self) -> bool:
        if self.profile is None:
            self._notify("Profile is not loaded yet.", level="error")
            return False
        if self.rate_error or self.hourly_rate is None:
            self._notify(RATE_ERROR, level="error")
            return False
        if not self.dirty:
            return True

        ok, updated = await self._remote(
            self.backend.update_provider_profile(
                self.provider_id, self.bio, self.hourly_rate, list(self.categories)
            ),
            "update your profile",
        )
        if not ok:
            return False
        self._reset(updated)
        self._notify("Profile updated.")
        logger.info("Profile saved for %s", self.provider_id)
        return True

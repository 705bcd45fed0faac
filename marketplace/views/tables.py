"""Admin services and users tables: search, one dropdown filter, pagination."""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from marketplace.backend.base import Backend
from marketplace.config import settings
from marketplace.logging_context import get_session_logger
from marketplace.schemas.catalog_schema import Service, ServiceCategory
from marketplace.schemas.session_schema import UserAccount, UserRole
from marketplace.tools.listing import (
    Page,
    clamp_page,
    filter_users,
    page_window,
    paginate,
    total_pages_for,
)
from marketplace.tools.services import search_services
from marketplace.views.base import Screen

logger = get_session_logger(__name__)

Row = TypeVar("Row")


class _TableScreen(Screen, Generic[Row], ABC):
    """Rows, a search box, one "all"-able filter and a pager."""

    def __init__(self, backend: Backend, page_size: int) -> None:
        super().__init__(backend)
        self.page_size = page_size
        self.rows: list[Row] = []
        self.search_term = ""
        self.filter_value = "all"
        self.page = 1

    @abstractmethod
    def _apply(self) -> list[Row]:
        """Rows passing the current search term and filter."""

    def search(self, term: str) -> None:
        self.search_term = term
        self.page = 1

    def set_filter(self, value: Optional[str]) -> None:
        self.filter_value = str(getattr(value, "value", value) or "all")
        self.page = 1

    @property
    def filtered(self) -> list[Row]:
        return self._apply()

    @property
    def current_page(self) -> Page[Row]:
        return paginate(self.filtered, self.page, self.page_size)

    def go_to_page(self, page: int) -> Page[Row]:
        self.page = clamp_page(page, total_pages_for(len(self.filtered), self.page_size))
        return self.current_page

    @property
    def pager(self) -> list[int]:
        total = total_pages_for(len(self.filtered), self.page_size)
        return page_window(self.page, total, settings.listing.pager_width)


class ServiceTableScreen(_TableScreen[Service]):
    """Admin services page."""

    def __init__(self, backend: Backend, page_size: Optional[int] = None) -> None:
        super().__init__(backend, page_size or settings.listing.services_page_size)

    async def load(self) -> bool:
        ok, services = await self._remote(self.backend.list_services(), "load services")
        if ok:
            self.rows = services
            logger.info("Admin services loaded: %d", len(services))
        return ok

    def set_category(self, category: "ServiceCategory | str | None") -> None:
        self.set_filter(category)

    def _apply(self) -> list[Service]:
        return search_services(self.rows, self.search_term, self.filter_value)


class UserTableScreen(_TableScreen[UserAccount]):
    """Admin users page."""

    def __init__(self, backend: Backend, page_size: Optional[int] = None) -> None:
        super().__init__(backend, page_size or settings.listing.users_page_size)

    async def load(self) -> bool:
        ok, users = await self._remote(self.backend.list_users(), "load users")
        if ok:
            self.rows = users
            logger.info("Admin users loaded: %d", len(users))
        return ok

    def set_role(self, role: "UserRole | str | None") -> None:
        self.set_filter(role)

    def _apply(self) -> list[UserAccount]:
        return filter_users(self.rows, self.search_term, self.filter_value)

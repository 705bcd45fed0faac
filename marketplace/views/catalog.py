"""Services page: catalog fetch plus category, price and text filters."""

from typing import Any, Optional

from marketplace.backend.base import Backend
from marketplace.logging_context import get_session_logger
from marketplace.schemas.catalog_schema import FilterOptions, Service, ServiceCategory
from marketplace.tools.services import categories_in, filter_services
from marketplace.views.base import Screen

logger = get_session_logger(__name__)


class CatalogScreen(Screen):
    """Holds the fetched catalog and the visitor's filter state."""

    def __init__(self, backend: Backend, query_params: Optional[dict[str, str]] = None) -> None:
        super().__init__(backend)
        self.services: list[Service] = []
        self.filters = FilterOptions.from_query(query_params or {})

    async def load(self) -> bool:
        ok, services = await self._remote(self.backend.list_services(), "load services")
        if ok:
            self.services = services
            logger.info("Catalog loaded: %d services", len(services))
        return ok

    def set_filter(self, **changes: Any) -> FilterOptions:
        """Update some filter fields; the rest keep their values."""
        self.filters = FilterOptions.model_validate({**self.filters.model_dump(), **changes})
        return self.filters

    def clear_filters(self) -> None:
        self.filters = FilterOptions()

    @property
    def visible(self) -> list[Service]:
        return filter_services(self.services, self.filters)

    @property
    def categories(self) -> list[ServiceCategory]:
        return categories_in(self.services)

    @property
    def query_params(self) -> dict[str, str]:
        return self.filters.to_query()

"""Service catalog filtering and lookup."""

import logging
from typing import Iterable, Optional

from marketplace.schemas.catalog_schema import FilterOptions, Service, ServiceCategory

logger = logging.getLogger(__name__)


def _matches(service: Service, options: FilterOptions) -> bool:
    if options.category and service.category != options.category:
        return False
    if options.min_price is not None and service.price < options.min_price:
        return False
    if options.max_price is not None and service.price > options.max_price:
        return False

    term = options.search_term.strip().lower()
    if term and term not in service.name.lower() and term not in service.description.lower():
        return False
    return True


def filter_services(services: Iterable[Service], options: Optional[FilterOptions] = None) -> list[Service]:
    """Return the services passing every set filter, in their original order.

    The input is never modified; an empty filter returns every service.
    """
    if options is None:
        return list(services)
    return [service for service in services if _matches(service, options)]


def find_service(services: Iterable[Service], service_id: str) -> Optional[Service]:
    """Look up a service by identifier. Returns None if not found."""
    for service in services:
        if service.id == service_id:
            return service
    logger.debug("Service not found: %s", service_id)
    return None


def categories_in(services: Iterable[Service]) -> list[ServiceCategory]:
    """Categories that have at least one service, in enumeration order."""
    present = {service.category for service in services}
    return [category for category in ServiceCategory if category in present]


def search_services(
    services: Iterable[Service], term: str, category: "ServiceCategory | str | None" = None
) -> list[Service]:
    """Admin table search: name or description, optionally narrowed to one category.

    ``category`` accepts ``"all"`` to mean no restriction.
    """
    needle = term.strip().lower()
    wanted = None if category in (None, "", "all") else ServiceCategory(category)
    return [
        service
        for service in services
        if (wanted is None or service.category == wanted)
        and (not needle or needle in service.name.lower() or needle in service.description.lower())
    ]

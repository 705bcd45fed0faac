"""
Marketplace entry point.

Usage:
    Console booking: python main.py console [--scenario booking]
    Catalog listing: python main.py services [category]
"""

import asyncio
import logging
import sys
from typing import Optional

from marketplace.backend import BackendClient, BackendError
from marketplace.config import settings
from marketplace.schemas.catalog_schema import ServiceCategory
from marketplace.utils import format_currency

logger = logging.getLogger(__name__)


async def _list_services(category: Optional[str]) -> int:
    """Print the catalog, optionally for one category."""
    client = BackendClient()
    try:
        services = await client.list_services(ServiceCategory(category) if category else None)
    except BackendError as exc:
        logger.error("Could not load services from %s: %s", settings.backend.url, exc)
        return 1
    for service in services:
        print(f"{service.id:>4}  {service.category.value:<11} {service.name:<32} "
              f"{format_currency(service.price):>9}")
    return 0


def _run_console_mode() -> None:
    """Start the interactive console booking session."""
    from console_demo import main as console_main

    sys.argv = [sys.argv[0], *sys.argv[2:]]
    console_main()


if __name__ == "__main__":
    mode = sys.argv[1] if len(sys.argv) > 1 else "console"
    if mode == "services":
        sys.exit(asyncio.run(_list_services(sys.argv[2] if len(sys.argv) > 2 else None)))
    elif mode == "console":
        _run_console_mode()
    else:
        print(__doc__)
        sys.exit(2)

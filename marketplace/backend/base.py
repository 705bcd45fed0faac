"""Operations the screens consume from the hosted backend."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from marketplace.schemas.booking_schema import BookingRecord, BookingRequest, BookingStatus
from marketplace.schemas.catalog_schema import Service, ServiceCategory
from marketplace.schemas.provider_schema import AvailabilityEntry, ProviderProfile, Weekday
from marketplace.schemas.session_schema import UserAccount


class Backend(Protocol):
    async def list_services(self, category: Optional[ServiceCategory] = None) -> list[Service]:
        ...

    async def get_service(self, service_id: str) -> Service:
        ...

    async def list_providers(
        self, category: Optional[ServiceCategory] = None
    ) -> list[ProviderProfile]:
        ...

    async def get_provider(self, provider_id: str) -> ProviderProfile:
        ...

    async def update_provider_profile(
        self,
        provider_id: str,
        bio: str,
        hourly_rate: Decimal,
        categories: list[ServiceCategory],
    ) -> ProviderProfile:
        ...

    async def list_users(self) -> list[UserAccount]:
        ...

    async def list_bookings(self, provider_id: Optional[str] = None) -> list[BookingRecord]:
        ...

    async def create_booking(self, request: BookingRequest) -> BookingRecord:
        ...

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> BookingRecord:
        ...

    async def get_availability(self, provider_id: str) -> list[AvailabilityEntry]:
        ...

    async def upsert_availability(self, entries: list[AvailabilityEntry]) -> None:
        ...

    async def delete_availability(self, provider_id: str, day: Weekday, start_time: str) -> None:
        ...

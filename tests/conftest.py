"""Shared test fixtures and helpers."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from marketplace.backend.errors import BackendError, InvalidStatusTransitionError, NotFoundError
from marketplace.schemas.booking_schema import BookingRecord, BookingRequest, BookingStatus
from marketplace.schemas.catalog_schema import Service, ServiceCategory
from marketplace.schemas.provider_schema import AvailabilityEntry, ProviderProfile, Weekday
from marketplace.schemas.session_schema import SessionContext, UserAccount, UserRole
from marketplace.tools.availability import generate_time_slots
from marketplace.tools.listing import ALLOWED_TRANSITIONS

# A Wednesday, so the date picker window starts two days in the past.
TODAY = date(2025, 3, 12)
SLOTS = generate_time_slots(8, 18)


def make_service(
    id: str,
    name: str,
    category: ServiceCategory,
    price: str,
    duration: int,
    description: str = "",
) -> Service:
    return Service(
        id=id,
        name=name,
        category=category,
        description=description,
        price=Decimal(price),
        duration=duration,
    )


CATALOG = [
    make_service("1", "Pipe Repair & Installation", ServiceCategory.PLUMBING, "85", 2,
                 "Professional pipe repair and installation services for your home."),
    make_service("2", "Electrical Panel Upgrade", ServiceCategory.ELECTRICAL, "250", 4,
                 "Upgrade your electrical panel for improved safety and capacity."),
    make_service("3", "Deep House Cleaning", ServiceCategory.CLEANING, "120", 3,
                 "Comprehensive cleaning service for your entire home."),
    make_service("4", "Interior Wall Painting", ServiceCategory.PAINTING, "180", 6,
                 "Professional interior painting with premium paints."),
    make_service("5", "Bathroom Plumbing Services", ServiceCategory.PLUMBING, "95", 2,
                 "Complete bathroom plumbing including fixtures and drains."),
    make_service("6", "Light Fixture Installation", ServiceCategory.ELECTRICAL, "75", 1,
                 "Installation of ceiling lights, chandeliers and wall fixtures."),
    make_service("7", "Cabinet Installation", ServiceCategory.CARPENTRY, "320", 8,
                 "Custom cabinet installation for kitchens and bathrooms."),
    make_service("8", "Garden Maintenance", ServiceCategory.GARDENING, "60", 2,
                 "Regular garden maintenance including mowing and trimming."),
]


def make_booking(
    id: str,
    status: BookingStatus = BookingStatus.PENDING,
    day: date = TODAY,
    time_slot: str = "9:00",
    total: str = "85",
    client_name: str = "Jane Doe",
    service_name: str = "Pipe Repair & Installation",
    provider_id: Optional[str] = "prov-1",
) -> BookingRecord:
    return BookingRecord(
        id=id,
        client_id="client-1",
        provider_id=provider_id,
        service_id="1",
        date=day,
        time_slot=time_slot,
        status=status,
        total=Decimal(total),
        client_name=client_name,
        service_name=service_name,
    )


def make_bookings(count: int = 25, pending: int = 12) -> list[BookingRecord]:
    """``count`` bookings, the first ``pending`` of them pending, the rest cycling statuses."""
    others = [BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingStatus.CANCELLED]
    records = []
    for i in range(count):
        service = CATALOG[i % len(CATALOG)]
        records.append(make_booking(
            id=f"BK-{i + 1:03d}",
            status=BookingStatus.PENDING if i < pending else others[i % 3],
            day=TODAY + timedelta(days=i % 10),
            time_slot=SLOTS[i % len(SLOTS)],
            total=str(service.price),
            client_name=f"Client {i + 1}",
            service_name=service.name,
            provider_id="prov-1" if i % 2 == 0 else "prov-2",
        ))
    return records


def make_provider(provider_id: str = "prov-1", **overrides) -> ProviderProfile:
    fields = {
        "id": provider_id,
        "name": "Bob Builder",
        "service_categories": [ServiceCategory.PLUMBING],
        "bio": "Licensed plumber.",
        "rating": 4.8,
        "hourly_rate": Decimal("65"),
        "completed_jobs": 120,
    }
    fields.update(overrides)
    return ProviderProfile(**fields)


class FakeBackend:
    """
    In-memory backend with the same contract as BackendClient.

    Enforces the booking lifecycle, assigns booking ids, and can be told
    to fail the next call of a given operation.
    """

    def __init__(
        self,
        services: Optional[list[Service]] = None,
        bookings: Optional[list[BookingRecord]] = None,
        users: Optional[list[UserAccount]] = None,
        providers: Optional[list[ProviderProfile]] = None,
    ) -> None:
        self.services = list(services if services is not None else CATALOG)
        self.bookings = list(bookings or [])
        self.users = list(users or [])
        self.providers = list(providers or [])
        self.availability: list[AvailabilityEntry] = []
        self.failures: dict[str, BackendError] = {}
        self.calls: list[str] = []
        self._next_id = 1000

    def fail(self, operation: str, error: Optional[BackendError] = None) -> None:
        self.failures[operation] = error or BackendError("Service unavailable", 503)

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        error = self.failures.pop(operation, None)
        if error is not None:
            raise error

    async def list_services(self, category: Optional[ServiceCategory] = None) -> list[Service]:
        self._enter("list_services")
        return [s for s in self.services if category is None or s.category == category]

    async def get_service(self, service_id: str) -> Service:
        self._enter("get_service")
        for service in self.services:
            if service.id == service_id:
                return service
        raise NotFoundError(f"Service {service_id} not found.", 404)

    async def list_providers(
        self, category: Optional[ServiceCategory] = None
    ) -> list[ProviderProfile]:
        self._enter("list_providers")
        return [p for p in self.providers if category is None or category in p.service_categories]

    async def get_provider(self, provider_id: str) -> ProviderProfile:
        self._enter("get_provider")
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        raise NotFoundError(f"Provider {provider_id} not found.", 404)

    async def update_provider_profile(
        self,
        provider_id: str,
        bio: str,
        hourly_rate: Decimal,
        categories: list[ServiceCategory],
    ) -> ProviderProfile:
        self._enter("update_provider_profile")
        for index, provider in enumerate(self.providers):
            if provider.id != provider_id:
                continue
            updated = provider.model_copy(update={
                "bio": bio,
                "hourly_rate": hourly_rate,
                "service_categories": list(categories),
            })
            self.providers[index] = updated
            return updated
        raise NotFoundError(f"Provider {provider_id} not found.", 404)

    async def list_users(self) -> list[UserAccount]:
        self._enter("list_users")
        return list(self.users)

    async def list_bookings(self, provider_id: Optional[str] = None) -> list[BookingRecord]:
        self._enter("list_bookings")
        return [b for b in self.bookings if provider_id is None or b.provider_id == provider_id]

    async def create_booking(self, request: BookingRequest) -> BookingRecord:
        self._enter("create_booking")
        self._next_id += 1
        record = BookingRecord(
            id=f"BK-{self._next_id}",
            client_id=request.client_id,
            provider_id=request.provider_id,
            service_id=request.service_id,
            date=request.date,
            time_slot=request.time_slot,
            total=request.total,
            notes=request.notes,
        )
        self.bookings.append(record)
        return record

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> BookingRecord:
        self._enter("update_booking_status")
        for index, record in enumerate(self.bookings):
            if record.id != booking_id:
                continue
            if status not in ALLOWED_TRANSITIONS[record.status]:
                raise InvalidStatusTransitionError(
                    f"Cannot move booking from {record.status.value} to {status.value}", 409
                )
            updated = record.model_copy(update={"status": status})
            self.bookings[index] = updated
            return updated
        raise NotFoundError(f"Booking {booking_id} not found.", 404)

    async def get_availability(self, provider_id: str) -> list[AvailabilityEntry]:
        self._enter("get_availability")
        return [e for e in self.availability if e.provider_id == provider_id]

    async def upsert_availability(self, entries: list[AvailabilityEntry]) -> None:
        self._enter("upsert_availability")
        for entry in entries:
            key = (entry.provider_id, entry.day_of_week, entry.start_time)
            self.availability = [
                e for e in self.availability
                if (e.provider_id, e.day_of_week, e.start_time) != key
            ]
            self.availability.append(entry)

    async def delete_availability(self, provider_id: str, day: Weekday, start_time: str) -> None:
        self._enter("delete_availability")
        self.availability = [
            e for e in self.availability
            if (e.provider_id, e.day_of_week, e.start_time) != (provider_id, day, start_time)
        ]


def make_session(role: UserRole, user_id: str = "user-1") -> SessionContext:
    return SessionContext(
        user_id=user_id,
        email=f"{role.value}@example.com",
        role=role,
        access_token="token-123",
        name=role.value.title(),
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def catalog():
    return list(CATALOG)


@pytest.fixture
def bookings():
    return make_bookings()


@pytest.fixture
def backend(bookings):
    return FakeBackend(bookings=bookings)


@pytest.fixture
def admin_session():
    return make_session(UserRole.ADMIN, "admin-1")


@pytest.fixture
def provider_session():
    return make_session(UserRole.PROVIDER, "prov-1")


@pytest.fixture
def client_session():
    return make_session(UserRole.CLIENT, "client-1")

"""
HTTP client for the hosted backend.

Talks to a PostgREST-style table API under ``/rest/v1`` and a password
token endpoint under ``/auth/v1``. Every transport or HTTP failure is
raised as a BackendError subclass; nothing here retries.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import httpx

from marketplace.backend.errors import (
    AuthenticationError,
    BackendError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from marketplace.config import BackendConfig, settings
from marketplace.schemas.booking_schema import BookingRecord, BookingRequest, BookingStatus
from marketplace.schemas.catalog_schema import Service, ServiceCategory
from marketplace.schemas.provider_schema import AvailabilityEntry, ProviderProfile, Weekday
from marketplace.schemas.session_schema import SessionContext, UserAccount, UserRole

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"
AUTH_PATH = "/auth/v1"

# Embedded names so booking tables can search by client and service name.
BOOKING_SELECT = (
    "*,client:users!client_id(name),provider:users!provider_id(name),service:services(name)"
)


def _record_from_row(row: dict[str, Any]) -> BookingRecord:
    """Flatten embedded client/provider/service names into a BookingRecord."""
    data = dict(row)
    for embedded, target in (
        ("client", "client_name"),
        ("provider", "provider_name"),
        ("service", "service_name"),
    ):
        related = data.pop(embedded, None)
        if isinstance(related, dict) and related.get("name"):
            data[target] = related["name"]
    return BookingRecord.model_validate(data)


class BackendClient:
    """Async client for the services, providers, bookings and availability tables."""

    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        session: Optional[SessionContext] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or settings.backend
        self.session = session
        self._transport = transport

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def _headers(self) -> dict[str, str]:
        token = self.session.access_token if self.session else self.config.anon_key
        return {
            "apikey": self.config.anon_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        request_headers = self._headers()
        if headers:
            request_headers.update(headers)

        try:
            async with httpx.AsyncClient(
                base_url=self.config.url,
                timeout=self.config.timeout_sec,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, params=params, json=json, headers=request_headers
                )
        except httpx.HTTPError as exc:
            logger.warning("Backend %s %s failed: %s", method, path, exc)
            raise BackendError(f"Could not reach the server: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "Backend %s %s returned %d: %s", method, path, response.status_code, response.text
            )
            raise self._error_for(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_for(response: httpx.Response) -> BackendError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = ""
        if isinstance(body, dict):
            message = body.get("message") or body.get("error_description") or body.get("msg") or ""
        message = message or f"Request failed with status {response.status_code}"

        if response.status_code in (401, 403):
            return AuthenticationError(message, response.status_code)
        if response.status_code == 404:
            return NotFoundError(message, response.status_code)
        if response.status_code in (409, 422):
            return InvalidStatusTransitionError(message, response.status_code)
        return BackendError(message, response.status_code)

    async def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        rows = await self._request("GET", f"{REST_PATH}/{table}", params=params)
        return rows or []

    # ------------------------------------------------------------------ #
    # Auth
    # ------------------------------------------------------------------ #

    async def sign_in(self, email: str, password: str) -> SessionContext:
        """Exchange credentials for a session and look up the user's role."""
        payload = await self._request(
            "POST",
            f"{AUTH_PATH}/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if not payload or "access_token" not in payload:
            raise AuthenticationError("Sign-in response did not include a session")

        user = payload.get("user") or {}
        provisional = SessionContext(
            user_id=user.get("id", ""),
            email=user.get("email", email),
            role=UserRole.CLIENT,
            access_token=payload["access_token"],
        )
        self.session = provisional

        try:
            rows = await self._select(
                "users", {"id": f"eq.{provisional.user_id}", "select": "role,name"}
            )
        except BackendError:
            self.session = None
            raise
        profile = rows[0] if rows else {}
        self.session = SessionContext(
            user_id=provisional.user_id,
            email=provisional.email,
            role=UserRole(profile.get("role") or UserRole.CLIENT.value),
            access_token=provisional.access_token,
            name=profile.get("name") or provisional.email.split("@")[0],
        )
        logger.info("Signed in %s as %s", self.session.email, self.session.role.value)
        return self.session

    async def sign_out(self) -> None:
        """End the current session. The session is dropped even if the call fails."""
        if self.session is None:
            return
        try:
            await self._request("POST", f"{AUTH_PATH}/logout")
        finally:
            logger.info("Signed out %s", self.session.email)
            self.session = None

    # ------------------------------------------------------------------ #
    # Catalog
    # ------------------------------------------------------------------ #

    async def list_services(self, category: Optional[ServiceCategory] = None) -> list[Service]:
        params = {"select": "*", "order": "name.asc"}
        if category:
            params["category"] = f"eq.{category.value}"
        rows = await self._select("services", params)
        return [Service.model_validate(row) for row in rows]

    async def get_service(self, service_id: str) -> Service:
        rows = await self._select("services", {"select": "*", "id": f"eq.{service_id}"})
        if not rows:
            raise NotFoundError(f"Service {service_id} not found.", 404)
        return Service.model_validate(rows[0])

    async def list_providers(
        self, category: Optional[ServiceCategory] = None
    ) -> list[ProviderProfile]:
        params = {"select": "*", "order": "rating.desc"}
        if category:
            params["service_categories"] = f"cs.{{{category.value}}}"
        rows = await self._select("providers", params)
        return [ProviderProfile.model_validate(row) for row in rows]

    async def get_provider(self, provider_id: str) -> ProviderProfile:
        rows = await self._select("providers", {"select": "*", "id": f"eq.{provider_id}"})
        if not rows:
            raise NotFoundError(f"Provider {provider_id} not found.", 404)
        return ProviderProfile.model_validate(rows[0])

    async def update_provider_profile(
        self,
        provider_id: str,
        bio: str,
        hourly_rate: Decimal,
        categories: list[ServiceCategory],
    ) -> ProviderProfile:
        """Replace the editable profile fields, including the offered categories."""
        rows = await self._request(
            "PATCH",
            f"{REST_PATH}/providers",
            params={"id": f"eq.{provider_id}", "select": "*"},
            json={
                "bio": bio,
                "hourly_rate": str(hourly_rate),
                "service_categories": [category.value for category in categories],
            },
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise NotFoundError(f"Provider {provider_id} not found.", 404)
        logger.info("Provider %s profile updated (%d categories)", provider_id, len(categories))
        return ProviderProfile.model_validate(rows[0])

    async def list_users(self) -> list[UserAccount]:
        rows = await self._select("users", {"select": "*", "order": "created_at.desc"})
        return [UserAccount.model_validate(row) for row in rows]

    # ------------------------------------------------------------------ #
    # Bookings
    # ------------------------------------------------------------------ #

    async def list_bookings(self, provider_id: Optional[str] = None) -> list[BookingRecord]:
        params = {"select": BOOKING_SELECT, "order": "date.desc"}
        if provider_id:
            params["provider_id"] = f"eq.{provider_id}"
        rows = await self._select("bookings", params)
        return [_record_from_row(row) for row in rows]

    async def create_booking(self, request: BookingRequest) -> BookingRecord:
        """Persist a booking. The backend assigns the id and initial status."""
        rows = await self._request(
            "POST",
            f"{REST_PATH}/bookings",
            json=request.model_dump(mode="json", exclude_none=True),
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise BackendError("Booking was not created.")
        record = _record_from_row(rows[0])
        logger.info("Booking created: %s on %s at %s", record.id, record.date, record.time_slot)
        return record

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> BookingRecord:
        """Request a status change. Lifecycle rules are enforced server-side."""
        rows = await self._request(
            "PATCH",
            f"{REST_PATH}/bookings",
            params={"id": f"eq.{booking_id}", "select": BOOKING_SELECT},
            json={
                "status": status.value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise NotFoundError(f"Booking {booking_id} not found.", 404)
        logger.info("Booking %s status -> %s", booking_id, status.value)
        return _record_from_row(rows[0])

    # ------------------------------------------------------------------ #
    # Availability
    # ------------------------------------------------------------------ #

    async def get_availability(self, provider_id: str) -> list[AvailabilityEntry]:
        rows = await self._select(
            "provider_availability", {"select": "*", "provider_id": f"eq.{provider_id}"}
        )
        return [AvailabilityEntry.model_validate(row) for row in rows]

    async def upsert_availability(self, entries: list[AvailabilityEntry]) -> None:
        if not entries:
            return
        await self._request(
            "POST",
            f"{REST_PATH}/provider_availability",
            json=[entry.model_dump(mode="json") for entry in entries],
            headers={"Prefer": "resolution=merge-duplicates"},
        )
        logger.info("Upserted %d availability slots", len(entries))

    async def delete_availability(self, provider_id: str, day: Weekday, start_time: str) -> None:
        await self._request(
            "DELETE",
            f"{REST_PATH}/provider_availability",
            params={
                "provider_id": f"eq.{provider_id}",
                "day_of_week": f"eq.{day.value}",
                "start_time": f"eq.{start_time}",
            },
        )
        logger.info("Deleted availability %s %s for %s", day.value, start_time, provider_id)

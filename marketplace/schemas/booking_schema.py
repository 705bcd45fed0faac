"""Booking draft, request payload and persisted record models."""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingRequest(BaseModel):
    """Payload sent to the backend to create a booking."""
    client_id: Optional[str] = None
    provider_id: Optional[str] = None
    service_id: str
    date: dt.date
    time_slot: str
    address: str
    phone: str
    email: str
    notes: Optional[str] = None
    total: Decimal


class BookingRecord(BaseModel):
    """A persisted booking with backend-assigned identity."""
    id: str
    client_id: Optional[str] = None
    provider_id: Optional[str] = None
    service_id: str
    date: dt.date
    time_slot: str
    status: BookingStatus = BookingStatus.PENDING
    total: Decimal = Field(ge=0)
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    client_name: str = ""
    service_name: str = ""
    provider_name: str = ""


@dataclass
class BookingDraft:
    """
    Wizard-owned accumulation of booking fields.

    Lives only as long as the wizard session. It has no identity until
    the backend accepts it, after which only booking_id is kept.
    """
    service_id: str
    date: Optional[str] = None
    time_slot: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    total: Optional[Decimal] = None
    booking_id: Optional[str] = None

    def to_request(
        self, client_id: Optional[str] = None, provider_id: Optional[str] = None
    ) -> BookingRequest:
        """Build the creation payload. All required fields must be present."""
        return BookingRequest(
            client_id=client_id,
            provider_id=provider_id,
            service_id=self.service_id,
            date=self.date,
            time_slot=self.time_slot,
            address=self.address,
            phone=self.phone,
            email=self.email,
            notes=self.notes or None,
            total=self.total,
        )

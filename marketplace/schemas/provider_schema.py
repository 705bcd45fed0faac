"""Provider profile and weekly availability models."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from marketplace.schemas.catalog_schema import ServiceCategory


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, value: "str | Weekday") -> "Weekday":
        """Resolve a weekday name case-insensitively."""
        if isinstance(value, cls):
            return value
        normalized = value.strip().capitalize()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown weekday: {value!r}") from None


class AvailabilityEntry(BaseModel):
    """One offered slot, as stored in the provider_availability table."""
    provider_id: str
    day_of_week: Weekday
    start_time: str
    end_time: str


class ProviderProfile(BaseModel):
    """Provider as shown on cards and the provider dashboard.

    Rating and completed_jobs are maintained by the backend.
    """
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    service_categories: list[ServiceCategory] = Field(default_factory=list)
    bio: str = ""
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    hourly_rate: Decimal = Field(gt=0)
    completed_jobs: int = Field(default=0, ge=0)

"""Service catalog data models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ServiceCategory(str, Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    CLEANING = "cleaning"
    CARPENTRY = "carpentry"
    PAINTING = "painting"
    GARDENING = "gardening"


class Service(BaseModel):
    """A bookable service as returned by the backend."""
    id: str
    name: str
    category: ServiceCategory
    description: str = ""
    price: Decimal = Field(gt=0)
    duration: int = Field(gt=0, description="Typical duration in hours")
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FilterOptions(BaseModel):
    """Catalog filter state. Unset fields do not restrict the result."""
    category: Optional[ServiceCategory] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search_term: str = ""

    @classmethod
    def from_query(cls, params: dict[str, str]) -> "FilterOptions":
        """Build filter state from the catalog page's query parameters.

        Only ``category`` travels in the URL; an unknown category is ignored.
        """
        raw = (params.get("category") or "").strip().lower()
        try:
            return cls(category=ServiceCategory(raw)) if raw else cls()
        except ValueError:
            return cls()

    def to_query(self) -> dict[str, str]:
        """Query parameters that mirror this filter state."""
        return {"category": self.category.value} if self.category else {}

    def is_active(self) -> bool:
        return bool(
            self.category
            or self.min_price is not None
            or self.max_price is not None
            or self.search_term.strip()
        )

"""
Field manager for the booking wizard's forms.

Each field is validated on entry and keeps its own status and error
message. A failed field never touches its siblings, and values survive
navigating back and forth between steps.

Usage:
    fields = FieldManager(ValidationContext(today=date.today(), time_slots=slots))
    ok, msg = fields.set_field("email", "a@b.com")
    errors = fields.validate_step(2)
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Callable, Optional

from marketplace.tools.availability import normalize_slot_label
from marketplace.utils import is_valid_email

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class FieldStatus(str, Enum):
    """Lifecycle status of a form field."""

    EMPTY = "empty"
    INVALID = "invalid"
    VALID = "valid"


@dataclass(frozen=True)
class ValidationContext:
    """Facts the validators need: today's date and the bookable slot grid."""

    today: date
    time_slots: list[str]


def parse_date(value: "str | date") -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def _validate_date(value: str, context: ValidationContext) -> bool:
    parsed = parse_date(value)
    return parsed is not None and parsed >= context.today


def _validate_time_slot(value: str, context: ValidationContext) -> bool:
    try:
        return normalize_slot_label(value) in context.time_slots
    except ValueError:
        return False


def _validate_not_blank(value: str, context: ValidationContext) -> bool:
    return bool(value.strip())


def _validate_email(value: str, context: ValidationContext) -> bool:
    return is_valid_email(value)


@dataclass(frozen=True)
class FieldDefinition:
    """Schema for a single form field."""

    name: str
    display_name: str
    step: int
    required: bool = True
    validator: Optional[Callable[[str, ValidationContext], bool]] = None
    error_message: str = ""


@dataclass
class FieldValue:
    """Current state and history of a form field."""

    raw_value: Optional[str] = None
    normalized_value: Optional[str] = None
    status: FieldStatus = FieldStatus.EMPTY
    error: Optional[str] = None
    history: list[str] = field(default_factory=list)


class FieldManager:
    """Validated storage for the wizard's schedule and contact fields."""

    FIELD_DEFINITIONS: list[FieldDefinition] = [
        FieldDefinition(
            name="date",
            display_name="date",
            step=1,
            validator=_validate_date,
            error_message="Please choose today or a later date.",
        ),
        FieldDefinition(
            name="time_slot",
            display_name="time slot",
            step=1,
            validator=_validate_time_slot,
            error_message="Please choose one of the available time slots.",
        ),
        FieldDefinition(
            name="address",
            display_name="service address",
            step=2,
            validator=_validate_not_blank,
            error_message="Address is required.",
        ),
        FieldDefinition(
            name="phone",
            display_name="phone number",
            step=2,
            validator=_validate_not_blank,
            error_message="Phone number is required.",
        ),
        FieldDefinition(
            name="email",
            display_name="email address",
            step=2,
            validator=_validate_email,
            error_message="Please enter a valid email address.",
        ),
        FieldDefinition(
            name="notes",
            display_name="notes",
            step=2,
            required=False,
        ),
    ]

    def __init__(self, context: ValidationContext) -> None:
        self.context = context
        self.fields: dict[str, FieldValue] = {
            defn.name: FieldValue() for defn in self.FIELD_DEFINITIONS
        }

    def _get_definition(self, name: str) -> FieldDefinition:
        for defn in self.FIELD_DEFINITIONS:
            if defn.name == name:
                return defn
        raise ValueError(f"Unknown field: {name}")

    def _normalize(self, name: str, value: str) -> str:
        """Apply field-specific normalization rules."""
        value = value.strip()
        if name == "date":
            return parse_date(value).strftime(DATE_FORMAT)
        if name == "time_slot":
            return normalize_slot_label(value)
        return value

    def set_field(self, name: str, raw_value: "str | date") -> tuple[bool, str]:
        """
        Set a field value with validation.

        Returns:
            (success, message) where success=True if validation passed.
        """
        defn = self._get_definition(name)
        if isinstance(raw_value, date):
            raw_value = raw_value.strftime(DATE_FORMAT)
        slot = self.fields[name]
        if slot.raw_value is not None and slot.raw_value != raw_value:
            slot.history.append(slot.raw_value)
        slot.raw_value = raw_value

        if not raw_value.strip() and not defn.required:
            slot.normalized_value = None
            slot.status = FieldStatus.EMPTY
            slot.error = None
            return True, f"No {defn.display_name} given"

        if defn.validator and not defn.validator(raw_value, self.context):
            slot.normalized_value = None
            slot.status = FieldStatus.INVALID
            slot.error = defn.error_message
            logger.debug("Field '%s' validation failed: '%s'", name, raw_value)
            return False, defn.error_message

        slot.normalized_value = self._normalize(name, raw_value)
        slot.status = FieldStatus.VALID
        slot.error = None
        logger.debug("Field '%s' set to '%s'", name, slot.normalized_value)
        return True, f"Got {defn.display_name}: {slot.normalized_value}"

    def clear_field(self, name: str) -> None:
        self._get_definition(name)
        self.fields[name] = FieldValue(history=self.fields[name].history)

    def get_value(self, name: str) -> Optional[str]:
        """Get the normalized value of a field."""
        return self.fields[name].normalized_value

    def get_raw(self, name: str) -> Optional[str]:
        """Value as the user typed it, shown back in the form."""
        return self.fields[name].raw_value

    def step_fields(self, step: int) -> list[FieldDefinition]:
        return [d for d in self.FIELD_DEFINITIONS if d.step == step]

    def validate_step(self, step: int) -> dict[str, str]:
        """Per-field error messages for a step; empty when the step is complete."""
        errors: dict[str, str] = {}
        for defn in self.step_fields(step):
            slot = self.fields[defn.name]
            if slot.status == FieldStatus.INVALID:
                errors[defn.name] = slot.error or defn.error_message
            elif defn.required and slot.status == FieldStatus.EMPTY:
                errors[defn.name] = defn.error_message
        return errors

    def errors(self) -> dict[str, str]:
        """Messages for every field whose last input failed validation."""
        return {
            name: slot.error
            for name, slot in self.fields.items()
            if slot.status == FieldStatus.INVALID and slot.error
        }

    def is_step_complete(self, step: int) -> bool:
        return not self.validate_step(step)

    def to_dict(self) -> dict[str, str]:
        """Export valid field values as a flat dict."""
        return {
            d.name: self.fields[d.name].normalized_value
            for d in self.FIELD_DEFINITIONS
            if self.fields[d.name].normalized_value is not None
        }

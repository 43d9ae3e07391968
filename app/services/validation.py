# app/services/validation.py
"""
Validation and sanitizing of raw order inquiry submissions.

``validate_inquiry`` takes whatever the client posted (an untyped mapping) and
either returns a normalized record ready for the ``order_inquiries`` table or
the first reason the submission was refused. It never touches the database,
so it is safe to call twice on the same data.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from app.core.enums import DeliveryOption

# Column caps; sanitized output is always truncated to these
NAME_MAX = 100
CONTACT_MAX = 50
CAKE_TYPE_MAX = 100
EVENT_TYPE_MAX = 100
DELIVERY_LOCATION_MAX = 200
ADDITIONAL_NOTES_MAX = 5000

NAME_MIN = 2
CONTACT_MIN = 10

HONEYPOT_FIELD = "honeypot"

# ASCII digits only, and no trailing newline
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_OPTIONAL_FIELDS = (
    ("event_type", EVENT_TYPE_MAX, "Event type must be less than 100 characters"),
    ("delivery_location", DELIVERY_LOCATION_MAX, "Delivery location must be less than 200 characters"),
    ("additional_notes", ADDITIONAL_NOTES_MAX, "Additional notes must be less than 5000 characters"),
)

_DELIVERY_OPTIONS = {opt.value for opt in DeliveryOption}


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    sanitized: Optional[dict] = None

    @classmethod
    def reject(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


def _blank(value: Any) -> bool:
    return value is None or value == ""


def is_honeypot_tripped(data: Mapping[str, Any]) -> bool:
    """True when the hidden bot-trap field carries anything but whitespace."""
    value = data.get(HONEYPOT_FIELD)
    if _blank(value) or value is False:
        return False
    return str(value).strip() != ""


def _trim(value: str, cap: int) -> str:
    return value.strip()[:cap].rstrip()


def _clip(value: Optional[str], cap: int) -> Optional[str]:
    if _blank(value):
        return None
    return _trim(str(value), cap) or None


def normalize_delivery_option(value: Any) -> str:
    """Trim and lower-case; anything that is not a non-empty string means pickup."""
    if isinstance(value, str) and value != "":
        return value.strip().lower()
    return DeliveryOption.PICKUP.value


def validate_inquiry(data: Mapping[str, Any]) -> ValidationResult:
    """
    Check a raw submission and return a ValidationResult.

    Rules run in a fixed order and the first failure wins:
    honeypot, name, contact, cake_type, date_needed, the optional free-text
    fields, then delivery_option.
    """
    if is_honeypot_tripped(data):
        return ValidationResult.reject("Invalid submission")

    name = data.get("name")
    if not isinstance(name, str) or len(name.strip()) < NAME_MIN:
        return ValidationResult.reject("Name must be at least 2 characters")
    if len(name) > NAME_MAX:
        return ValidationResult.reject("Name must be less than 100 characters")

    contact = data.get("contact")
    if not isinstance(contact, str) or len(contact.strip()) < CONTACT_MIN:
        return ValidationResult.reject("Contact must be at least 10 characters")
    if len(contact) > CONTACT_MAX:
        return ValidationResult.reject("Contact must be less than 50 characters")

    cake_type = data.get("cake_type")
    if not isinstance(cake_type, str) or not cake_type.strip():
        return ValidationResult.reject("Cake type is required")
    if len(cake_type) > CAKE_TYPE_MAX:
        return ValidationResult.reject("Cake type must be less than 100 characters")

    date_needed = data.get("date_needed")
    if not isinstance(date_needed, str) or date_needed == "":
        return ValidationResult.reject("Date needed is required")
    if not _DATE_RE.fullmatch(date_needed):
        return ValidationResult.reject("Invalid date format")

    for field, cap, message in _OPTIONAL_FIELDS:
        value = data.get(field)
        if _blank(value):
            continue
        if not isinstance(value, str) or len(value) > cap:
            return ValidationResult.reject(message)

    delivery_option = normalize_delivery_option(data.get("delivery_option"))
    if delivery_option not in _DELIVERY_OPTIONS:
        return ValidationResult.reject("Invalid delivery option")

    sanitized = {
        "name": _trim(name, NAME_MAX),
        "contact": _trim(contact, CONTACT_MAX),
        "cake_type": _trim(cake_type, CAKE_TYPE_MAX),
        "event_type": _clip(data.get("event_type"), EVENT_TYPE_MAX),
        "delivery_option": delivery_option,
        "delivery_location": _clip(data.get("delivery_location"), DELIVERY_LOCATION_MAX),
        "date_needed": date_needed.strip(),
        "additional_notes": _clip(data.get("additional_notes"), ADDITIONAL_NOTES_MAX),
    }
    return ValidationResult(valid=True, sanitized=sanitized)

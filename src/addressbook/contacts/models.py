from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError, field_validator, validate_email
from pydantic_core import PydanticCustomError


CATEGORIES: List[str] = ["personal", "business", "family", "friend"]

# Wire field name -> attribute name. `id` is handled separately.
WIRE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "company": "company",
    "category": "category",
    "address": "address",
}


@dataclass
class Contact:
    """A single address book entry. `id` is None until the store assigns one."""

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    category: Optional[str] = None
    address: Optional[str] = None

    @property
    def is_saved(self) -> bool:
        return self.id is not None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        if self.first_name and self.last_name:
            return (self.first_name[0] + self.last_name[0]).upper()
        return "??"

    def copy(self) -> "Contact":
        return replace(self)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Contact":
        """
        Build a contact from its JSON wire representation.

        Missing string fields default to "" and a missing `id` stays None.
        Raises ValueError if `data` is not an object or `id` is not numeric.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        contact_id: Optional[int] = None
        raw_id = data.get("id")
        if raw_id is not None:
            if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float)):
                raise ValueError(f"Invalid contact id: {raw_id!r}")
            if isinstance(raw_id, float) and not raw_id.is_integer():
                raise ValueError(f"Invalid contact id: {raw_id!r}")
            contact_id = int(raw_id)

        values = {}
        for wire_name, attr in WIRE_FIELDS.items():
            value = data.get(wire_name)
            values[attr] = value if isinstance(value, str) else ""
        return cls(id=contact_id, **values)

    def to_payload(self) -> Dict[str, str]:
        """JSON wire representation for writes. Never includes `id`."""
        return {
            wire_name: getattr(self, attr) or ""
            for wire_name, attr in WIRE_FIELDS.items()
        }


class ContactForm(BaseModel):
    """Form-level constraints on a contact before it is submitted."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("first_name")
    @classmethod
    def _first_name_required(cls, v: Optional[str]) -> Optional[str]:
        if not (v or "").strip():
            raise ValueError("First name is required")
        return v

    @field_validator("last_name")
    @classmethod
    def _last_name_required(cls, v: Optional[str]) -> Optional[str]:
        if not (v or "").strip():
            raise ValueError("Last name is required")
        return v

    @field_validator("email")
    @classmethod
    def _email_valid(cls, v: Optional[str]) -> Optional[str]:
        s = (v or "").strip()
        if not s:
            raise ValueError("Email is required")
        try:
            validate_email(s)
        except PydanticCustomError:
            raise ValueError("Please enter a valid email address") from None
        return v


def validate_contact(contact: Contact) -> List[str]:
    """Return the form validation messages for `contact` (empty when valid)."""
    try:
        ContactForm(
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
        )
    except ValidationError as e:
        messages: List[str] = []
        for err in e.errors():
            msg = str(err.get("msg", ""))
            # pydantic prefixes custom ValueError messages
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            messages.append(msg)
        return messages
    return []

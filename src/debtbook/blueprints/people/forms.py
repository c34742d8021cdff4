"""Person payload validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

NAME_MAX_LENGTH = 120
OPTIONAL_FIELDS = {
    # API key -> (attribute, max length)
    "relationship": ("relationship", 80),
    "email": ("email", 255),
    "phone": ("phone", 40),
}


@dataclass(slots=True)
class PersonForm:
    """Represents person input prior to validation.

    With ``partial=True`` only keys present in the payload are validated and
    reported in :attr:`cleaned`, which is how updates are applied.
    """

    partial: bool = False
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    cleaned: dict[str, Optional[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> PersonForm:
        form = cls(partial=partial)
        form.raw_data = dict(data)
        return form

    def validate(self) -> bool:
        """Validate the bound data and populate :attr:`cleaned`."""

        self.errors.clear()
        self.cleaned.clear()

        if "name" in self.raw_data or not self.partial:
            name = self.raw_data.get("name")
            if not isinstance(name, str) or not name.strip():
                self._add_error("name", "Name is required.")
            elif len(name.strip()) > NAME_MAX_LENGTH:
                self._add_error("name", f"Name must be {NAME_MAX_LENGTH} characters or fewer.")
            else:
                self.cleaned["name"] = name.strip()

        for key, (attribute, max_length) in OPTIONAL_FIELDS.items():
            if key not in self.raw_data:
                if not self.partial:
                    self.cleaned[attribute] = None
                continue
            value = self.raw_data[key]
            if value is None:
                self.cleaned[attribute] = None
                continue
            if not isinstance(value, str):
                self._add_error(key, f"{key.capitalize()} must be text.")
                continue
            value = value.strip()
            if len(value) > max_length:
                self._add_error(key, f"{key.capitalize()} must be {max_length} characters or fewer.")
                continue
            # Blank optional fields are stored as null.
            self.cleaned[attribute] = value or None

        email = self.cleaned.get("email")
        if email and not _looks_like_email(email):
            self.cleaned.pop("email")
            self._add_error("email", "Enter a valid email address.")

        return not self.errors

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)


def _looks_like_email(value: str) -> bool:
    local, sep, domain = value.partition("@")
    return bool(sep and local and domain and "@" not in domain)

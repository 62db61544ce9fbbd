"""User records as served by the remote directory, and the form payload.

The remote service owns and validates every record; these classes only hold
transient copies. Parsing is lenient because the demo API echoes partial
records back from POST and PUT.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

# Form fields that must be non-empty before a create or update is sent.
REQUIRED_FIELDS = ("name", "username", "email", "phone")

FIELD_LABELS = {
    "name": "Full Name",
    "username": "Username",
    "email": "Email Address",
    "phone": "Phone Number",
    "website": "Website",
}


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value)


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


@dataclass(frozen=True)
class Geo:
    lat: str = ""
    lng: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Geo:
        return cls(lat=_text(data, "lat"), lng=_text(data, "lng"))

    def to_dict(self) -> dict[str, str]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Address:
    street: str = ""
    suite: str = ""
    city: str = ""
    zipcode: str = ""
    geo: Geo = field(default_factory=Geo)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Address:
        return cls(
            street=_text(data, "street"),
            suite=_text(data, "suite"),
            city=_text(data, "city"),
            zipcode=_text(data, "zipcode"),
            geo=Geo.from_dict(_section(data, "geo")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "street": self.street,
            "suite": self.suite,
            "city": self.city,
            "zipcode": self.zipcode,
            "geo": self.geo.to_dict(),
        }


@dataclass(frozen=True)
class Company:
    name: str = ""
    catch_phrase: str = ""
    bs: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Company:
        return cls(
            name=_text(data, "name"),
            catch_phrase=_text(data, "catchPhrase"),
            bs=_text(data, "bs"),
        )

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "catchPhrase": self.catch_phrase, "bs": self.bs}


@dataclass(frozen=True)
class User:
    """A user record from the remote directory."""

    id: int
    name: str
    username: str
    email: str
    phone: str
    website: str = ""
    address: Address = field(default_factory=Address)
    company: Company = field(default_factory=Company)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        """Build a User from the service's JSON.

        Raises:
            KeyError: If ``id`` is missing.
            ValueError: If ``id`` is not an integer.
        """
        return cls(
            id=int(data["id"]),
            name=_text(data, "name"),
            username=_text(data, "username"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            website=_text(data, "website"),
            address=Address.from_dict(_section(data, "address")),
            company=Company.from_dict(_section(data, "company")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "phone": self.phone,
            "website": self.website,
            "address": self.address.to_dict(),
            "company": self.company.to_dict(),
        }

    @property
    def display_number(self) -> str:
        """Zero-padded record number, e.g. ``#003``."""
        return f"#{self.id:03d}"


@dataclass(frozen=True)
class CreateUserData:
    """Fields a user can supply through the create/edit form."""

    name: str = ""
    email: str = ""
    phone: str = ""
    username: str = ""
    website: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> CreateUserData:
        """Read submitted form values, ignoring unknown keys."""
        return cls(**{f.name: _text(form, f.name).strip() for f in fields(cls)})

    @classmethod
    def from_user(cls, user: User) -> CreateUserData:
        """Pre-populate the form from an existing record."""
        return cls(
            name=user.name,
            email=user.email,
            phone=user.phone,
            username=user.username,
            website=user.website,
        )

    def missing_required(self) -> list[str]:
        """Names of required fields that are empty."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def to_payload(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

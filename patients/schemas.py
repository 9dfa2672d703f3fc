"""
Transfer shapes exchanged with callers of the patient service.

``PatientRecord`` is the full public view of a patient, ``PatientInput``
is what create/update/patch accept and ``Page`` wraps one slice of a
listing.  ``PatientInput`` keeps "not sent" apart from "sent" by
defaulting every field to :data:`UNSET`; partial updates depend on that
distinction.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Optional


class _Unset:
    """Marker for a field that was not part of the request body."""
    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'UNSET'


UNSET: Any = _Unset()

# Client-writable attributes and their JSON names, in display order.
MUTABLE_FIELDS: dict[str, str] = {
    'first_name': 'firstName',
    'last_name': 'lastName',
    'address': 'address',
    'city': 'city',
    'state': 'state',
    'zip_code': 'zipCode',
    'phone_number': 'phoneNumber',
    'email': 'email',
}


@dataclass
class PatientInput:
    first_name: Any = UNSET
    last_name: Any = UNSET
    address: Any = UNSET
    city: Any = UNSET
    state: Any = UNSET
    zip_code: Any = UNSET
    phone_number: Any = UNSET
    email: Any = UNSET

    def is_present(self, attr: str) -> bool:
        """True when ``attr`` was sent with a non-null value."""
        value = getattr(self, attr)
        return value is not UNSET and value is not None

    def present_fields(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if self.is_present(f.name)}


@dataclass
class PatientRecord:
    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Page:
    """One page of patients plus the metadata needed to walk the rest.

    Derived fields are always computed by :meth:`build` so that every
    store yields the same numbers for the same window.
    """
    content: list[PatientRecord] = field(default_factory=list)
    page: int = 0
    size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True

    @classmethod
    def build(cls, content: list[PatientRecord], page: int, size: int, total_elements: int) -> "Page":
        total_pages = math.ceil(total_elements / size) if size > 0 else 0
        return cls(
            content=list(content),
            page=page,
            size=size,
            total_elements=total_elements,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
        )

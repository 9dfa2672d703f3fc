"""
Input validation for patient create, full update and partial update.

Checks are pure: they look at the input (and, for the contact rule, at a
candidate record) and return every violation found rather than stopping
at the first one.  The service decides when to run the contact rule; a
patch is checked against the merged record, not the raw payload.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import EmailValidator

from patients.schemas import MUTABLE_FIELDS, UNSET, PatientInput

CREATE = 'create'
FULL_UPDATE = 'full-update'
PATCH = 'patch'
MODES = (CREATE, FULL_UPDATE, PATCH)

FIRST_NAME_REQUIRED = 'First name is required'
LAST_NAME_REQUIRED = 'Last name is required'
EMAIL_INVALID = 'Email should be valid'
CONTACT_REQUIRED = 'Either phone number or email must be provided'
CONTACT_FIELD = 'contact'

_REQUIRED_NAMES = (
    ('first_name', FIRST_NAME_REQUIRED),
    ('last_name', LAST_NAME_REQUIRED),
)

_email_validator = EmailValidator(message=EMAIL_INVALID)


@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {'field': self.field, 'message': self.message}


def is_blank(value: Any) -> bool:
    if value is None or value is UNSET:
        return True
    return isinstance(value, str) and not value.strip()


def has_contact_method(phone_number: Any, email: Any) -> bool:
    return not is_blank(phone_number) or not is_blank(email)


def contact_violations(candidate: Any) -> list[Violation]:
    """Check the phone-or-email rule on anything with those two attributes."""
    if has_contact_method(getattr(candidate, 'phone_number', None), getattr(candidate, 'email', None)):
        return []
    return [Violation(CONTACT_FIELD, CONTACT_REQUIRED)]


def validate_input(data: PatientInput, mode: str) -> list[Violation]:
    """Return the violations of ``data`` for the given operation mode.

    ``create`` and ``full-update`` require both names and apply the
    contact rule to the input itself, since the input is the whole
    resulting record.  ``patch`` only checks the fields that were sent.
    """
    if mode not in MODES:
        raise ValueError(f"unknown validation mode: {mode!r}")

    violations: list[Violation] = []
    mistyped: set[str] = set()
    for attr, json_name in MUTABLE_FIELDS.items():
        value = getattr(data, attr)
        if data.is_present(attr) and not isinstance(value, str):
            violations.append(Violation(json_name, f'{json_name} must be a string'))
            mistyped.add(attr)

    for attr, message in _REQUIRED_NAMES:
        if attr in mistyped:
            continue
        if mode != PATCH or data.is_present(attr):
            if is_blank(getattr(data, attr)):
                violations.append(Violation(MUTABLE_FIELDS[attr], message))

    email = data.email
    if 'email' not in mistyped and not is_blank(email):
        try:
            _email_validator(email)
        except DjangoValidationError:
            violations.append(Violation('email', EMAIL_INVALID))

    if mode != PATCH:
        violations.extend(contact_violations(data))
    return violations

"""
Conversion between the persisted :class:`~patients.models.Patient` and
the :class:`~patients.schemas.PatientRecord` transfer shape.
"""
from __future__ import annotations

from typing import Any, Optional

from patients.models import Patient
from patients.schemas import MUTABLE_FIELDS, UNSET, PatientRecord


def to_record(patient: Optional[Patient]) -> Optional[PatientRecord]:
    if patient is None:
        return None
    return PatientRecord(
        id=patient.pk,
        first_name=patient.first_name,
        last_name=patient.last_name,
        address=patient.address,
        city=patient.city,
        state=patient.state,
        zip_code=patient.zip_code,
        phone_number=patient.phone_number,
        email=patient.email,
        created_at=patient.created_at,
        updated_at=patient.updated_at,
    )


def to_entity(data: Any) -> Optional[Patient]:
    """Build an unsaved Patient from a record or an input.

    Identifier and timestamps are never copied; the store assigns them.
    Fields left UNSET on an input become empty.
    """
    if data is None:
        return None
    values = {}
    for attr in MUTABLE_FIELDS:
        value = getattr(data, attr, None)
        values[attr] = None if value is UNSET else value
    return Patient(**values)

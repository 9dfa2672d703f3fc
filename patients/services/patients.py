"""
Patient lifecycle: listing, lookup, create, full update, partial update
and delete.

All business rules live here.  Validation runs before anything is
written, identifiers and timestamps are left to the store, and every
mutating call runs inside one database transaction covering the
fetch, the checks and the save.  Concurrent writers are last-writer-wins.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from django.db import transaction

from patients.exceptions import PatientNotFound, ValidationFailed
from patients.mapper import to_entity, to_record
from patients.models import Patient
from patients.repository import DjangoPatientRepository, PatientRepository
from patients.schemas import MUTABLE_FIELDS, UNSET, Page, PatientInput, PatientRecord
from patients.validation import CREATE, FULL_UPDATE, PATCH, Violation, contact_violations, validate_input

logger = logging.getLogger(__name__)


class PatientService:
    def __init__(self, repository: Optional[PatientRepository] = None) -> None:
        self.repository = repository if repository is not None else DjangoPatientRepository()

    # ------------------------------------------------------------------ reads
    def list_all(self) -> list[PatientRecord]:
        """Every patient, in whatever order the store returns them."""
        return [to_record(p) for p in self.repository.find_all()]

    @transaction.atomic
    def list_page(self, page: int, size: int) -> Page:
        violations = [Violation(name, f'{name} must not be negative')
                      for name, value in (('page', page), ('size', size)) if value < 0]
        self._raise_if_invalid(violations, 'list')
        patients, total = self.repository.find_page(page * size, size)
        return Page.build([to_record(p) for p in patients], page, size, total)

    def get_by_id(self, patient_id: int) -> PatientRecord:
        return to_record(self._fetch(patient_id))

    # ----------------------------------------------------------------- writes
    @transaction.atomic
    def create(self, data: PatientInput) -> PatientRecord:
        self._raise_if_invalid(validate_input(data, CREATE), 'create')
        saved = self.repository.save(to_entity(data))
        logger.info('patient %s created', saved.pk)
        return to_record(saved)

    @transaction.atomic
    def replace(self, patient_id: int, data: PatientInput) -> PatientRecord:
        """Full update: fields missing from ``data`` are cleared."""
        patient = self._fetch(patient_id)
        self._raise_if_invalid(validate_input(data, FULL_UPDATE), 'replace', patient_id)
        for attr in MUTABLE_FIELDS:
            value = getattr(data, attr)
            setattr(patient, attr, None if value is UNSET else value)
        saved = self.repository.save(patient)
        logger.info('patient %s replaced', patient_id)
        return to_record(saved)

    @transaction.atomic
    def merge_patch(self, patient_id: int, data: PatientInput) -> PatientRecord:
        """Partial update: only fields sent with a non-null value change.

        The contact rule is checked on the record as it would look after
        the merge, so a patch touching only the city is fine on a patient
        that already has an email.
        """
        patient = self._fetch(patient_id)
        changes = data.present_fields()
        violations = validate_input(data, PATCH)
        merged = dataclasses.replace(to_record(patient), **changes)
        violations.extend(contact_violations(merged))
        self._raise_if_invalid(violations, 'patch', patient_id)

        for attr, value in changes.items():
            setattr(patient, attr, value)
        saved = self.repository.save(patient)
        logger.info('patient %s patched (%s)', patient_id, ', '.join(MUTABLE_FIELDS[a] for a in changes) or 'no fields')
        return to_record(saved)

    @transaction.atomic
    def remove(self, patient_id: int) -> None:
        if not self.repository.exists_by_id(patient_id):
            logger.info('delete of missing patient %s', patient_id)
            raise PatientNotFound(patient_id)
        self.repository.delete_by_id(patient_id)
        logger.info('patient %s deleted', patient_id)

    # ---------------------------------------------------------------- helpers
    def _fetch(self, patient_id: int) -> Patient:
        patient = self.repository.find_by_id(patient_id)
        if patient is None:
            logger.info('patient %s not found', patient_id)
            raise PatientNotFound(patient_id)
        return patient

    @staticmethod
    def _raise_if_invalid(violations: list[Violation], action: str, patient_id: Optional[int] = None) -> None:
        if not violations:
            return
        logger.info('%s rejected for patient %s: %s', action, patient_id if patient_id is not None else '-',
                    ', '.join(sorted({v.field for v in violations})))
        raise ValidationFailed(violations)

"""
Persistence boundary for patients.

:class:`PatientRepository` is the interface the service depends on;
:class:`DjangoPatientRepository` implements it on the Django ORM.
Database errors are not caught here, they reach the caller unchanged.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from patients.models import Patient
from patients.schemas import MUTABLE_FIELDS


class PatientRepository(ABC):
    @abstractmethod
    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        ...

    @abstractmethod
    def find_all(self) -> list[Patient]:
        ...

    @abstractmethod
    def find_page(self, offset: int, limit: int) -> tuple[list[Patient], int]:
        """Return up to ``limit`` patients starting at ``offset`` and the total count."""
        ...

    @abstractmethod
    def save(self, patient: Patient) -> Patient:
        """Insert when ``patient`` has no id yet, update otherwise."""
        ...

    @abstractmethod
    def exists_by_id(self, patient_id: int) -> bool:
        ...

    @abstractmethod
    def delete_by_id(self, patient_id: int) -> None:
        ...


class DjangoPatientRepository(PatientRepository):

    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        return Patient.objects.filter(pk=patient_id).first()

    def find_all(self) -> list[Patient]:
        return list(Patient.objects.all())

    def find_page(self, offset: int, limit: int) -> tuple[list[Patient], int]:
        qs = Patient.objects.order_by('id')
        total = qs.count()
        if limit <= 0 or offset >= total:
            return [], total
        return list(qs[offset:offset + limit]), total

    def save(self, patient: Patient) -> Patient:
        if patient.pk is None:
            patient.save()
            return patient
        # Last writer wins: a row deleted since it was read is inserted again
        # under the same id.
        saved, _ = Patient.objects.update_or_create(
            pk=patient.pk,
            defaults={attr: getattr(patient, attr) for attr in MUTABLE_FIELDS},
        )
        return saved

    def exists_by_id(self, patient_id: int) -> bool:
        return Patient.objects.filter(pk=patient_id).exists()

    def delete_by_id(self, patient_id: int) -> None:
        Patient.objects.filter(pk=patient_id).delete()

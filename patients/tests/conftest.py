import pytest

from patients.models import Patient
from patients.services.patients import PatientService

from .helpers import DEFAULTS


@pytest.fixture
def service():
    return PatientService()


@pytest.fixture
def make_patient(db):
    def _make(**overrides):
        return Patient.objects.create(**{**DEFAULTS, **overrides})
    return _make

"""
Tests for the patient service.

Most tests run against the real ORM repository; the ones that must prove
the store is never reached use a mock repository instead.
"""
from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError
from django.utils import timezone

from patients.exceptions import PatientNotFound, ValidationFailed
from patients.models import Patient
from patients.repository import DjangoPatientRepository, PatientRepository
from patients.schemas import PatientInput
from patients.services.patients import PatientService
from patients.validation import CONTACT_FIELD

from .helpers import full_input

pytestmark = pytest.mark.django_db

MISSING_ID = 999_999


def violation_fields(exc_info):
    return {v.field for v in exc_info.value.violations}


def age_updated_at(patient):
    """Push updated_at into the past so a later save is visibly newer."""
    past = timezone.now() - timedelta(days=1)
    Patient.objects.filter(pk=patient.pk).update(updated_at=past)
    patient.refresh_from_db()
    return patient


# ---------------------------------------------------------------------- create

def test_create_assigns_identifier_and_timestamps(service):
    record = service.create(full_input())
    assert record.id is not None
    assert record.created_at is not None
    assert record.updated_at is not None
    assert record.first_name == 'John'
    assert Patient.objects.filter(pk=record.id).exists()


def test_create_with_email_only(service):
    record = service.create(PatientInput(first_name='Ann', last_name='Lee', email='ann@example.com'))
    stored = Patient.objects.get(pk=record.id)
    assert stored.phone_number is None
    assert stored.city is None


def test_create_without_contact_method_is_rejected(service):
    with pytest.raises(ValidationFailed) as exc_info:
        service.create(full_input(phone_number=None, email=None))
    assert violation_fields(exc_info) == {CONTACT_FIELD}
    assert Patient.objects.count() == 0


def test_create_validation_failure_never_reaches_repository():
    repo = mock.Mock(spec=PatientRepository)
    service = PatientService(repo)
    with pytest.raises(ValidationFailed) as exc_info:
        service.create(PatientInput(first_name='', email='bad'))
    assert violation_fields(exc_info) == {'firstName', 'lastName', 'email'}
    assert repo.mock_calls == []


# --------------------------------------------------------------------- reads

def test_get_by_id(service, make_patient):
    patient = make_patient()
    record = service.get_by_id(patient.pk)
    assert record.id == patient.pk
    assert record.email == 'john.doe@example.com'


def test_list_all(service, make_patient):
    ids = {make_patient(first_name=f'P{i}').pk for i in range(3)}
    assert {r.id for r in service.list_all()} == ids


def test_list_page_windows_25_records(service, make_patient):
    for i in range(25):
        make_patient(first_name=f'Patient{i}')

    first = service.list_page(0, 10)
    assert len(first.content) == 10
    assert first.total_elements == 25
    assert first.total_pages == 3
    assert first.first is True
    assert first.last is False

    last = service.list_page(2, 10)
    assert len(last.content) == 5
    assert last.last is True
    assert last.first is False


def test_list_page_is_ordered_by_id_without_overlap(service, make_patient):
    for i in range(7):
        make_patient(first_name=f'Patient{i}')
    seen = []
    for page in range(3):
        seen.extend(r.id for r in service.list_page(page, 3).content)
    assert seen == sorted(Patient.objects.values_list('id', flat=True))


def test_list_page_size_zero(service, make_patient):
    make_patient()
    page = service.list_page(0, 0)
    assert page.content == []
    assert page.total_elements == 1
    assert page.total_pages == 0
    assert page.last is True


def test_list_page_rejects_negative_arguments(service):
    with pytest.raises(ValidationFailed) as exc_info:
        service.list_page(-1, 10)
    assert violation_fields(exc_info) == {'page'}
    with pytest.raises(ValidationFailed) as exc_info:
        service.list_page(-1, -5)
    assert violation_fields(exc_info) == {'page', 'size'}


def test_list_page_far_past_the_end_is_empty(service, make_patient):
    make_patient()
    page = service.list_page(10**17, 200)
    assert page.content == []
    assert page.total_elements == 1
    assert page.total_pages == 1
    assert page.first is False
    assert page.last is True


# ------------------------------------------------------------------- replace

def test_replace_overwrites_every_field(service, make_patient):
    patient = age_updated_at(make_patient())
    record = service.replace(patient.pk, full_input(first_name='Johnny', email='johnny@example.com'))
    assert record.id == patient.pk
    assert record.first_name == 'Johnny'
    assert record.email == 'johnny@example.com'
    assert record.created_at == patient.created_at
    assert record.updated_at > patient.updated_at


def test_replace_clears_omitted_fields(service, make_patient):
    patient = make_patient()
    service.replace(patient.pk, PatientInput(first_name='John', last_name='Doe', email='john.doe@example.com'))
    stored = Patient.objects.get(pk=patient.pk)
    assert stored.address is None
    assert stored.city is None
    assert stored.state is None
    assert stored.zip_code is None
    assert stored.phone_number is None
    assert stored.email == 'john.doe@example.com'


def test_replace_without_contact_method_is_rejected(service, make_patient):
    patient = make_patient()
    with pytest.raises(ValidationFailed) as exc_info:
        service.replace(patient.pk, full_input(phone_number=None, email=None))
    assert violation_fields(exc_info) == {CONTACT_FIELD}
    assert Patient.objects.get(pk=patient.pk).phone_number == '+1234567890'


def test_replace_requires_names(service, make_patient):
    patient = make_patient()
    with pytest.raises(ValidationFailed) as exc_info:
        service.replace(patient.pk, PatientInput(email='x@example.com'))
    assert violation_fields(exc_info) == {'firstName', 'lastName'}


# ---------------------------------------------------------------------- patch

def test_patch_changes_only_sent_field(service, make_patient):
    patient = age_updated_at(make_patient())
    record = service.merge_patch(patient.pk, PatientInput(first_name='X'))

    assert record.first_name == 'X'
    assert record.last_name == patient.last_name
    assert record.address == patient.address
    assert record.city == patient.city
    assert record.state == patient.state
    assert record.zip_code == patient.zip_code
    assert record.phone_number == patient.phone_number
    assert record.email == patient.email
    assert record.created_at == patient.created_at
    assert record.updated_at > patient.updated_at


def test_patch_keeps_omitted_fields_where_replace_clears_them(service, make_patient):
    patched = make_patient()
    replaced = make_patient()
    data = PatientInput(first_name='John', last_name='Doe', email='john.doe@example.com')

    service.merge_patch(patched.pk, data)
    service.replace(replaced.pk, data)

    patched.refresh_from_db()
    replaced.refresh_from_db()
    for attr in ('address', 'city', 'state', 'zip_code'):
        assert getattr(patched, attr) is not None
        assert getattr(replaced, attr) is None


def test_patch_empty_string_overwrites(service, make_patient):
    patient = make_patient()
    record = service.merge_patch(patient.pk, PatientInput(address=''))
    assert record.address == ''


def test_patch_null_value_is_ignored(service, make_patient):
    patient = make_patient()
    record = service.merge_patch(patient.pk, PatientInput(city=None, state='CA'))
    assert record.city == 'New York'
    assert record.state == 'CA'


def test_patch_checks_contact_rule_on_merged_record(service, make_patient):
    patient = make_patient(phone_number=None)
    # Record still has an email, so touching only the city is fine
    record = service.merge_patch(patient.pk, PatientInput(city='Boston'))
    assert record.city == 'Boston'


def test_patch_clearing_both_contacts_is_rejected(service, make_patient):
    patient = make_patient()
    with pytest.raises(ValidationFailed) as exc_info:
        service.merge_patch(patient.pk, PatientInput(phone_number='', email=''))
    assert violation_fields(exc_info) == {CONTACT_FIELD}
    patient.refresh_from_db()
    assert patient.phone_number == '+1234567890'


def test_patch_clearing_last_contact_is_rejected(service, make_patient):
    patient = make_patient(email=None)
    with pytest.raises(ValidationFailed):
        service.merge_patch(patient.pk, PatientInput(phone_number=' '))


def test_patch_rejects_blank_name_and_bad_email_together(service, make_patient):
    patient = make_patient()
    with pytest.raises(ValidationFailed) as exc_info:
        service.merge_patch(patient.pk, PatientInput(last_name='', email='oops'))
    assert violation_fields(exc_info) == {'lastName', 'email'}


# --------------------------------------------------------------------- remove

def test_remove_deletes(service, make_patient):
    patient = make_patient()
    service.remove(patient.pk)
    assert not Patient.objects.filter(pk=patient.pk).exists()


# ------------------------------------------------------------------ not found

@pytest.mark.parametrize('call', [
    lambda s: s.get_by_id(MISSING_ID),
    lambda s: s.replace(MISSING_ID, full_input()),
    lambda s: s.merge_patch(MISSING_ID, PatientInput(first_name='X')),
    lambda s: s.remove(MISSING_ID),
])
def test_missing_patient_raises_not_found(service, make_patient, call):
    make_patient()
    with pytest.raises(PatientNotFound) as exc_info:
        call(service)
    assert str(exc_info.value.detail) == f'Patient not found with id: {MISSING_ID}'
    assert Patient.objects.count() == 1


def test_not_found_performs_no_mutation():
    repo = mock.Mock(spec=PatientRepository)
    repo.find_by_id.return_value = None
    repo.exists_by_id.return_value = False
    service = PatientService(repo)

    for call in (
        lambda: service.replace(1, full_input()),
        lambda: service.merge_patch(1, PatientInput(city='Boston')),
        lambda: service.remove(1),
    ):
        with pytest.raises(PatientNotFound):
            call()

    repo.save.assert_not_called()
    repo.delete_by_id.assert_not_called()


# ------------------------------------------------------------------- storage

def test_storage_errors_propagate_unchanged():
    repo = mock.Mock(spec=PatientRepository)
    error = DatabaseError('connection lost')
    repo.save.side_effect = error
    with pytest.raises(DatabaseError) as exc_info:
        PatientService(repo).create(full_input())
    assert exc_info.value is error
    repo.save.assert_called_once()


def test_save_after_concurrent_delete_reinserts_same_id(make_patient):
    repo = DjangoPatientRepository()
    patient = repo.find_by_id(make_patient().pk)
    Patient.objects.filter(pk=patient.pk).delete()

    patient.city = 'Denver'
    saved = repo.save(patient)
    assert saved.pk == patient.pk
    assert Patient.objects.get(pk=patient.pk).city == 'Denver'

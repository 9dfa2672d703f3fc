"""
Patient REST endpoints.

Thin HTTP layer over :class:`~patients.services.patients.PatientService`:
decode the body, call the service, encode the result.  Errors raised by
the service are rendered by ``patients.exceptions.api_exception_handler``.

Endpoints implemented:

* ``GET /api/patient?page=0&size=10`` – one page of patients.
* ``GET /api/patient/all`` – every patient, unpaginated.
* ``POST /api/patient`` – create a patient.
* ``GET /api/patient/<id>`` – a single patient.
* ``PUT /api/patient/<id>`` – full update; omitted fields are cleared.
* ``PATCH /api/patient/<id>`` – partial update; omitted fields are kept.
* ``DELETE /api/patient/<id>`` – delete a patient.
"""
from __future__ import annotations

from django.conf import settings
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.patient import (
    PatientInputSerializer,
    PatientPageQuerySerializer,
    PatientPageSerializer,
    PatientRecordSerializer,
)
from ..services.patients import PatientService

_VALIDATION_ERROR = openapi.Response('Validation error - invalid input data')
_NOT_FOUND = openapi.Response('Patient not found')


def _service() -> PatientService:
    return PatientService()


def _read_input(request):
    payload = PatientInputSerializer(data=request.data)
    payload.is_valid(raise_exception=True)
    return payload.to_input()


@swagger_auto_schema(
    method='get',
    operation_summary='Get all patients',
    operation_description='Retrieve a paginated list of patients (page is 0-indexed).',
    query_serializer=PatientPageQuerySerializer,
    responses={200: PatientPageSerializer, 400: _VALIDATION_ERROR},
)
@swagger_auto_schema(
    method='post',
    operation_summary='Create a new patient',
    operation_description='First name, last name, and either phone number or email are required.',
    request_body=PatientInputSerializer,
    responses={201: PatientRecordSerializer, 400: _VALIDATION_ERROR},
)
@api_view(['GET', 'POST'])
def patient_collection(request):
    if request.method == 'POST':
        record = _service().create(_read_input(request))
        return Response(PatientRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    q = PatientPageQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    page = q.validated_data.get('page', 0)
    size = q.validated_data.get('size', settings.PATIENT_PAGE_SIZE_DEFAULT)
    result = _service().list_page(page, size)
    return Response(PatientPageSerializer(result).data)


@swagger_auto_schema(
    method='get',
    operation_summary='Get every patient',
    operation_description='Unpaginated listing for small data sets; order is not guaranteed.',
    responses={200: PatientRecordSerializer(many=True)},
)
@api_view(['GET'])
def patient_list_all(request):
    records = _service().list_all()
    return Response(PatientRecordSerializer(records, many=True).data)


@swagger_auto_schema(
    method='get',
    operation_summary='Get patient by ID',
    responses={200: PatientRecordSerializer, 404: _NOT_FOUND},
)
@swagger_auto_schema(
    method='put',
    operation_summary='Update patient',
    operation_description='Full update: every field to keep must be sent again; omitted fields are cleared.',
    request_body=PatientInputSerializer,
    responses={200: PatientRecordSerializer, 400: _VALIDATION_ERROR, 404: _NOT_FOUND},
)
@swagger_auto_schema(
    method='patch',
    operation_summary='Partially update patient',
    operation_description='Only fields present in the body are updated; null values are ignored.',
    request_body=PatientInputSerializer,
    responses={200: PatientRecordSerializer, 400: _VALIDATION_ERROR, 404: _NOT_FOUND},
)
@swagger_auto_schema(
    method='delete',
    operation_summary='Delete patient',
    responses={204: openapi.Response('Patient deleted'), 404: _NOT_FOUND},
)
@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def patient_detail(request, pk: int):
    service = _service()
    if request.method == 'GET':
        record = service.get_by_id(pk)
    elif request.method == 'PUT':
        record = service.replace(pk, _read_input(request))
    elif request.method == 'PATCH':
        record = service.merge_patch(pk, _read_input(request))
    else:
        service.remove(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(PatientRecordSerializer(record).data)

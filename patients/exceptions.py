"""
Error kinds raised by the patient service and the DRF handler that
renders them.

Every error leaves the API in one envelope::

    {"ok": false, "error": {"code": ..., "message": ..., "violations": [...]}}

``violations`` is only present on 400 responses.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ValidationFailed(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation failed'
    default_code = 'validation_failed'

    def __init__(self, violations: Iterable[Any]):
        self.violations = list(violations)
        super().__init__()


class PatientNotFound(exceptions.NotFound):

    def __init__(self, patient_id: Any):
        self.patient_id = patient_id
        super().__init__(f'Patient not found with id: {patient_id}')


def _violations_from_detail(detail: Any) -> list[dict]:
    if isinstance(detail, dict):
        out = []
        for field, messages in detail.items():
            if not isinstance(messages, (list, tuple)):
                messages = [messages]
            out.extend({'field': field, 'message': str(m)} for m in messages)
        return out
    if isinstance(detail, (list, tuple)):
        return [{'field': 'non_field_errors', 'message': str(m)} for m in detail]
    return [{'field': 'non_field_errors', 'message': str(detail)}]


def _envelope(code: str, message: Any, violations: list | None = None) -> dict:
    error: dict[str, Any] = {'code': code, 'message': message}
    if violations is not None:
        error['violations'] = violations
    return {'ok': False, 'error': error}


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        if isinstance(exc, DatabaseError):
            logger.error('storage failure in %s', type(view).__name__, exc_info=exc)
            return Response(_envelope('storage_failure', 'Storage layer error'),
                            status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.error('unhandled error in %s', type(view).__name__, exc_info=exc)
        return Response(_envelope('server_error', str(exc)), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationFailed):
        data = _envelope(exc.default_code, str(exc.detail), [v.as_dict() for v in exc.violations])
    elif isinstance(exc, exceptions.ValidationError):
        data = _envelope('validation_failed', 'Invalid request', _violations_from_detail(exc.detail))
    elif isinstance(exc, Http404):
        data = _envelope('not_found', 'Not found')
    else:
        detail = resp.data.get('detail', resp.data) if isinstance(resp.data, dict) else str(resp.data)
        code = getattr(exc, 'default_code', None) or 'api_error'
        data = _envelope(code, str(detail) if not isinstance(detail, (dict, list)) else detail)
    return Response(data, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp: Response) -> dict:
    return {k: v for k, v in resp.items() if k in ('Allow', 'Retry-After', 'WWW-Authenticate')}

import html

import bleach
from django.conf import settings
from rest_framework import serializers

from patients.schemas import PatientInput

# Free-text fields have markup removed; identifiers such as email, phone
# number and zip code are stored exactly as sent.
FREE_TEXT_FIELDS = ('first_name', 'last_name', 'address', 'city', 'state')


def _text(max_length, **kwargs):
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=max_length, **kwargs)


def strip_markup(value):
    """Drop HTML tags without escaping what is left."""
    return html.unescape(bleach.clean(value, tags=set(), strip=True))


class PatientInputSerializer(serializers.Serializer):
    """Request body for create, full update and partial update.

    Every field is optional here; which ones are required depends on the
    operation and is decided by ``patients.validation``.  Only keys that
    were actually sent end up in ``validated_data``.  ``id``, ``createdAt``
    and ``updatedAt`` are server-owned and silently ignored.
    """
    firstName = _text(100, source='first_name')
    lastName = _text(100, source='last_name')
    address = _text(255)
    city = _text(100)
    state = _text(100)
    zipCode = _text(20, source='zip_code')
    phoneNumber = _text(32, source='phone_number')
    email = _text(254)

    def validate(self, attrs):
        cleaned = {}
        errors = {}
        by_source = {f.source: (name, f) for name, f in self.fields.items()}
        for attr, value in attrs.items():
            if attr in FREE_TEXT_FIELDS and isinstance(value, str):
                value = strip_markup(value)
                name, field = by_source[attr]
                if len(value) > field.max_length:
                    errors[name] = [f'Ensure this field has no more than {field.max_length} characters.']
            cleaned[attr] = value
        if errors:
            raise serializers.ValidationError(errors)
        return cleaned

    def to_input(self) -> PatientInput:
        return PatientInput(**self.validated_data)


class PatientRecordSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    address = serializers.CharField(allow_null=True)
    city = serializers.CharField(allow_null=True)
    state = serializers.CharField(allow_null=True)
    zipCode = serializers.CharField(source='zip_code', allow_null=True)
    phoneNumber = serializers.CharField(source='phone_number', allow_null=True)
    email = serializers.CharField(allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)


class PatientPageSerializer(serializers.Serializer):
    content = PatientRecordSerializer(many=True)
    page = serializers.IntegerField()
    size = serializers.IntegerField()
    totalElements = serializers.IntegerField(source='total_elements')
    totalPages = serializers.IntegerField(source='total_pages')
    first = serializers.BooleanField()
    last = serializers.BooleanField()


class PatientPageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=0, default=0)
    size = serializers.IntegerField(required=False, min_value=0)

    def validate_size(self, v):
        if v > settings.PATIENT_PAGE_SIZE_MAX:
            raise serializers.ValidationError(f'size must be at most {settings.PATIENT_PAGE_SIZE_MAX}')
        return v

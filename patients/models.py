"""
Database models for the patient service.

A single :class:`Patient` table holds every record.  Identifiers come
from the database sequence and both timestamps are stamped by Django on
save, so nothing the client sends can set them.
"""
from __future__ import annotations

from django.db import models


class Patient(models.Model):
    """Persisted patient record.

    The "phone number or email" rule is enforced when input is validated,
    not by a database constraint, which is why both columns are nullable.
    """
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    address = models.CharField(max_length=255, null=True, blank=True)
    city = models.CharField(max_length=100, null=True, blank=True)
    state = models.CharField(max_length=100, null=True, blank=True)
    zip_code = models.CharField(max_length=20, null=True, blank=True)
    phone_number = models.CharField(max_length=32, null=True, blank=True)
    email = models.CharField(max_length=254, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients'
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.pk})"

"""
Django admin registration for the patient model, reachable under
``/admin/`` for inspecting records during development.
"""

from django.contrib import admin

from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'phone_number', 'email', 'city', 'updated_at')
    search_fields = ('first_name', 'last_name', 'phone_number', 'email')
    list_filter = ('state',)
    readonly_fields = ('created_at', 'updated_at')

"""
URL mappings for the patient service API.

Paths match the ones the dashboard client calls.  Trailing slashes are
deliberately omitted (``APPEND_SLASH = False``).
"""
from django.urls import path, include

from .views import health
from .views import patients

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Patients
    path('api/patient', patients.patient_collection, name='patient-collection'),
    path('api/patient/all', patients.patient_list_all, name='patient-list-all'),
    path('api/patient/<int:pk>', patients.patient_detail, name='patient-detail'),
]

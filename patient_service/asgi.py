"""
ASGI config for the patient service project.

Only plain HTTP is served; each request still runs its service call in
its own database transaction.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "patient_service.settings")

from django.core.asgi import get_asgi_application  # noqa: E402

application = get_asgi_application()

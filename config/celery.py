"""
Celery configuration for the community hub backend.

Celery discovers tasks by inspecting any `tasks.py` modules in installed apps.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

celery_app = Celery("config")

# Namespacing Celery settings with the "CELERY_" prefix in Django settings
celery_app.config_from_object("django.conf:settings", namespace="CELERY")
celery_app.autodiscover_tasks()

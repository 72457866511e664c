"""
Project package for the community hub backend.

The Celery application is imported here so that shared tasks use
`config.celery_app` by default.
"""
from .celery import celery_app

__all__ = ["celery_app"]

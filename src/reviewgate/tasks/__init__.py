"""Procrastinate task definitions."""

from .activity_tasks import defer_activity, record_activity
from .worker import app as procrastinate_app

__all__ = [
    "defer_activity",
    "procrastinate_app",
    "record_activity",
]

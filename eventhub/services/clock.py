"""Timestamps for new and updated records."""

from datetime import datetime

from django.utils import timezone


def now() -> datetime:
    """Current UTC time, truncated to the millisecond precision BSON stores."""
    current = timezone.now()
    return current.replace(microsecond=current.microsecond // 1000 * 1000)

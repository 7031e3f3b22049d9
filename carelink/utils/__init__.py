"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, storage_now, to_storage_datetime, utc_now

__all__ = [
    "ensure_utc",
    "storage_now",
    "to_storage_datetime",
    "utc_now",
]

"""Helpers for moving datetimes between the domain and the database."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` to an aware UTC datetime.

    Values read back from the database are naive; they are stored in UTC so
    the missing ``tzinfo`` is attached rather than converted.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` expressed in UTC without ``tzinfo`` for persistence."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


def storage_now() -> datetime:
    """Return the current UTC time in the naive form stored by the database."""

    return utc_now().replace(tzinfo=None)

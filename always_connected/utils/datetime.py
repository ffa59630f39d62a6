"""Helpers for working with timezone-aware datetimes.

Timestamps are always handled as aware UTC values in the domain layer. SQLite
``DATETIME`` columns drop ``tzinfo``, so values are stored as naive UTC and
re-attached on the way out.
"""

from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC but without ``tzinfo``."""

    localized = ensure_utc(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    """Return the ISO-8601 representation of ``value`` in UTC."""

    normalized = ensure_utc(value)
    if normalized is None:  # pragma: no cover - guarded by the signature
        msg = "A datetime value is required"
        raise ValueError(msg)
    return normalized.isoformat()


def now_naive_utc() -> datetime:
    """Return the current UTC time without attaching ``tzinfo``."""

    return now_utc().replace(tzinfo=None)

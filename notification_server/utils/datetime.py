"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import datetime, timezone


def now_in_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def now_in_utc_naive_datetime() -> datetime:
    """Return the current UTC time without attaching ``tzinfo``."""

    return now_in_utc().replace(tzinfo=None)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC, which is how they are written
    to the database.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_utc_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` in UTC but without ``tzinfo``.

    SQLite ``DATETIME`` columns drop the offset, so the storage layer keeps naive
    UTC values and the domain layer works with aware ones.
    """

    localized = ensure_utc(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)


def isoformat_utc(value: datetime | None = None) -> str:
    """Return an ISO-8601 string for ``value`` (defaults to now) with a ``Z`` suffix."""

    moment = ensure_utc(value) or now_in_utc()
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

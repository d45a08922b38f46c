"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_utc,
    ensure_utc_naive_datetime,
    isoformat_utc,
    now_in_utc,
    now_in_utc_naive_datetime,
)

__all__ = [
    "ensure_utc",
    "ensure_utc_naive_datetime",
    "isoformat_utc",
    "now_in_utc",
    "now_in_utc_naive_datetime",
]

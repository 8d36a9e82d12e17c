"""Shared utilities: datetime, text."""

from projecthub.shared.utils.datetime import (
    days_in_month,
    ensure_utc,
    is_date_only,
    parse_date,
    parse_datetime,
    utc_now,
    utc_today,
)
from projecthub.shared.utils.text import slugify

__all__ = [
    "days_in_month",
    "ensure_utc",
    "is_date_only",
    "parse_date",
    "parse_datetime",
    "slugify",
    "utc_now",
    "utc_today",
]

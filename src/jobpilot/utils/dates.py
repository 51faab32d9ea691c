"""Lenient parsing of the date strings users type into their profile."""

from __future__ import annotations

from datetime import date, datetime

__all__ = ["parse_profile_date"]

# Tried in order after ISO-8601.
_DATE_FORMATS = ("%Y-%m", "%Y", "%B %Y", "%b %Y", "%m/%Y")


def parse_profile_date(value: str | None) -> date | None:
    """Parse *value* into a :class:`date`, or return *None* if it cannot be read.

    Accepts ``YYYY-MM-DD`` (and full ISO datetimes), ``YYYY-MM``, ``YYYY``,
    ``January 2023``, ``Jan 2023`` and ``01/2023``. Missing day/month parts
    default to the first.
    """
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None

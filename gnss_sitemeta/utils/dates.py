"""
Date and time utilities for station metadata.

Provides conversions between the time notations found in station
metadata files:
- Year and Day of Year (DOY) with seconds of day, as used in SINEX epochs
- Calendar dates
- Sitelog date strings (CCYY-MM-DDThh:mmZ)

All returned datetimes are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


UTC = timezone.utc

# Comparison sentinel for open-ended time ranges
FAR_FUTURE = datetime(2099, 12, 31, tzinfo=UTC)

SECONDS_PER_DAY = 86400


def doy_from_date(year: int, month: int, day: int) -> int:
    """Calculate day of year from calendar date.

    Args:
        year: Year
        month: Month (1-12)
        day: Day of month (1-31)

    Returns:
        Day of year (1-366)
    """
    dt = datetime(year, month, day)
    return dt.timetuple().tm_yday


def date_from_doy(year: int, doy: int) -> tuple[int, int]:
    """Convert year and DOY to month and day.

    Args:
        year: Year
        doy: Day of year (1-366)

    Returns:
        Tuple of (month, day)
    """
    dt = datetime(year, 1, 1) + timedelta(days=doy - 1)
    return dt.month, dt.day


def expand_two_digit_year(yy: int) -> int:
    """Expand a two digit year: above 50 is 19YY, otherwise 20YY."""
    if yy > 50:
        return 1900 + yy
    return 2000 + yy


def datetime_from_year_doy_sod(year: int, doy: int, sod: int) -> datetime:
    """Build a UTC datetime from year, day of year and seconds of day.

    Args:
        year: Four digit year
        doy: Day of year (1-366)
        sod: Seconds of day (0-86400)

    Returns:
        UTC datetime

    Raises:
        ValueError: If doy or sod are out of range
    """
    days_in_year = 366 if datetime(year, 12, 31).timetuple().tm_yday == 366 else 365
    if not 1 <= doy <= days_in_year:
        raise ValueError(f"day of year out of range: {doy}")
    if not 0 <= sod <= SECONDS_PER_DAY:
        raise ValueError(f"seconds of day out of range: {sod}")
    return datetime(year, 1, 1, tzinfo=UTC) + timedelta(days=doy - 1, seconds=sod)


def format_sitelog_datetime(dt: datetime | None) -> str:
    """Format a datetime the way sitelogs write it (CCYY-MM-DDThh:mmZ).

    Unset values are rendered as the template placeholder.
    """
    if dt is None:
        return "(CCYY-MM-DDThh:mmZ)"
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%MZ")


def format_sitelog_date(dt: datetime | None) -> str:
    """Format a date the way sitelogs write it (CCYY-MM-DD)."""
    if dt is None:
        return "(CCYY-MM-DD)"
    return dt.astimezone(UTC).strftime("%Y-%m-%d")

"""Utility modules for date/time handling, logging and satellite systems."""

from gnss_sitemeta.utils.dates import (
    FAR_FUTURE,
    UTC,
    doy_from_date,
    date_from_doy,
    expand_two_digit_year,
    datetime_from_year_doy_sod,
    format_sitelog_datetime,
    format_sitelog_date,
)
from gnss_sitemeta.utils.logging import (
    get_logger,
    setup_logging,
    log_warnings,
)
from gnss_sitemeta.utils.multi_gnss import (
    SatelliteSystem,
    parse_satellite_systems,
    format_satellite_systems,
)

__all__ = [
    # Dates
    "FAR_FUTURE",
    "UTC",
    "doy_from_date",
    "date_from_doy",
    "expand_two_digit_year",
    "datetime_from_year_doy_sod",
    "format_sitelog_datetime",
    "format_sitelog_date",
    # Logging
    "get_logger",
    "setup_logging",
    "log_warnings",
    # Satellite systems
    "SatelliteSystem",
    "parse_satellite_systems",
    "format_satellite_systems",
]

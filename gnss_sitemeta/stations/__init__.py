"""Station metadata: site logs, equipment history and station information."""

from gnss_sitemeta.stations.models import (
    Site,
    SiteWarning,
    TimeRange,
    EffectiveDates,
    Receiver,
    Antenna,
    # Descriptive sections
    FormInformation,
    SiteIdentification,
    ApproximatePosition,
    SiteLocation,
    SurveyedLocalTie,
    FrequencyStandard,
    CollocationInformation,
    MetSensorKind,
    MeteorologicalSensor,
    LocalEpisodicEffect,
    ContactParty,
    MoreInformation,
)
from gnss_sitemeta.stations.site_log_parser import (
    SiteLogParser,
    SitelogBlock,
    parse_site_log,
    parse_site_logs_directory,
    id_by_filename,
    parse_date,
    parse_float,
    parse_effective_dates,
)
from gnss_sitemeta.stations.history import HistoryCleaner, clean_site
from gnss_sitemeta.stations.station_info import (
    IntervalReconciler,
    StationInterval,
    station_intervals,
)

__all__ = [
    # Model
    "Site",
    "SiteWarning",
    "TimeRange",
    "EffectiveDates",
    "Receiver",
    "Antenna",
    "FormInformation",
    "SiteIdentification",
    "ApproximatePosition",
    "SiteLocation",
    "SurveyedLocalTie",
    "FrequencyStandard",
    "CollocationInformation",
    "MetSensorKind",
    "MeteorologicalSensor",
    "LocalEpisodicEffect",
    "ContactParty",
    "MoreInformation",
    # Site logs
    "SiteLogParser",
    "SitelogBlock",
    "parse_site_log",
    "parse_site_logs_directory",
    "id_by_filename",
    "parse_date",
    "parse_float",
    "parse_effective_dates",
    # History and station information
    "HistoryCleaner",
    "clean_site",
    "IntervalReconciler",
    "StationInterval",
    "station_intervals",
]

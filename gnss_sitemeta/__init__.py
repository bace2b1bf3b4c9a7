"""
gnss-sitemeta: GNSS station metadata tools

Decodes IGS site logs and SINEX files, cleans receiver and antenna
histories and derives the station information intervals used by GNSS
processing software.
"""

__version__ = "0.3.0"
__author__ = "gnss-sitemeta Team"

from gnss_sitemeta.core.config import Settings
from gnss_sitemeta.stations.site_log_parser import parse_site_log
from gnss_sitemeta.stations.history import clean_site
from gnss_sitemeta.stations.station_info import station_intervals

__all__ = ["Settings", "parse_site_log", "clean_site", "station_intervals", "__version__"]

"""SINEX decoding: header, blocks and fixed-column records."""

from gnss_sitemeta.sinex.columns import (
    OPEN_EPOCH,
    ColumnDecoder,
    clean_field,
    parse_time,
)
from gnss_sitemeta.sinex.records import (
    RECORD_TYPES,
    SinexBlock,
    ObservationTechnique,
    DiscontinuityType,
    SinexHeader,
    FileReference,
    SiteIdRecord,
    ReceiverRecord,
    AntennaRecord,
    EstimateRecord,
    DiscontinuityRecord,
    StationCoordinates,
    all_station_coordinates,
)
from gnss_sitemeta.sinex.decoder import (
    BlockStreamDecoder,
    open_sinex,
    read_site_equipment,
)

__all__ = [
    "OPEN_EPOCH",
    "ColumnDecoder",
    "clean_field",
    "parse_time",
    "RECORD_TYPES",
    "SinexBlock",
    "ObservationTechnique",
    "DiscontinuityType",
    "SinexHeader",
    "FileReference",
    "SiteIdRecord",
    "ReceiverRecord",
    "AntennaRecord",
    "EstimateRecord",
    "DiscontinuityRecord",
    "StationCoordinates",
    "all_station_coordinates",
    "BlockStreamDecoder",
    "open_sinex",
    "read_site_equipment",
]

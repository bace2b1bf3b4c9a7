"""
SINEX record types.

Each record is a dataclass with a ``decode`` classmethod that reads it from
a ColumnDecoder positioned on one data line. Column layouts follow the
SINEX 2.02 format description.

References:
    SINEX Format: https://www.iers.org/IERS/EN/Organization/AnalysisCoordinator/SinexFormat/sinex.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator

from gnss_sitemeta.sinex.columns import ColumnDecoder
from gnss_sitemeta.stations.models import Antenna, Receiver


class SinexBlock(str, Enum):
    """Block names of a SINEX file."""

    FILE_REFERENCE = "FILE/REFERENCE"
    FILE_COMMENT = "FILE/COMMENT"
    INPUT_HISTORY = "INPUT/HISTORY"
    INPUT_FILES = "INPUT/FILES"
    INPUT_ACKNOWLEDGEMENTS = "INPUT/ACKNOWLEDGEMENTS"
    NUTATION_DATA = "NUTATION/DATA"
    PRECESSION_DATA = "PRECESSION/DATA"
    SOURCE_ID = "SOURCE/ID"
    SITE_ID = "SITE/ID"
    SITE_DATA = "SITE/DATA"
    SITE_RECEIVER = "SITE/RECEIVER"
    SITE_ANTENNA = "SITE/ANTENNA"
    SITE_GPS_PHASE_CENTER = "SITE/GPS_PHASE_CENTER"
    SITE_GAL_PHASE_CENTER = "SITE/GAL_PHASE_CENTER"
    SITE_ECCENTRICITY = "SITE/ECCENTRICITY"
    SATELLITE_ID = "SATELLITE/ID"
    SATELLITE_PHASE_CENTER = "SATELLITE/PHASE_CENTER"
    SOLUTION_EPOCHS = "SOLUTION/EPOCHS"
    BIAS_EPOCHS = "BIAS/EPOCHS"
    SOLUTION_STATISTICS = "SOLUTION/STATISTICS"
    SOLUTION_ESTIMATE = "SOLUTION/ESTIMATE"
    SOLUTION_APRIORI = "SOLUTION/APRIORI"
    SOLUTION_MATRIX_ESTIMATE = "SOLUTION/MATRIX_ESTIMATE"
    SOLUTION_MATRIX_APRIORI = "SOLUTION/MATRIX_APRIORI"
    SOLUTION_NORMAL_EQUATION_VECTOR = "SOLUTION/NORMAL_EQUATION_VECTOR"
    SOLUTION_DISCONTINUITY = "SOLUTION/DISCONTINUITY"


class ObservationTechnique(str, Enum):
    """Technique code of the header and site records."""

    COMBINED = "C"
    DORIS = "D"
    SLR = "L"
    LLR = "M"
    GPS = "P"
    VLBI = "R"


class DiscontinuityType(str, Enum):
    POSITION = "P"
    VELOCITY = "V"
    ANNUAL = "A"
    SEMI_ANNUAL = "S"
    EXP_POST_SEISMIC = "E"  # Exponential post-seismic relaxation


TECHNIQUE_CODES = {t.value: t for t in ObservationTechnique}
DISCONTINUITY_CODES = {t.value: t for t in DiscontinuityType}

# Station coordinate parameter types of SOLUTION/ESTIMATE
COORDINATE_PARAMETERS = ("STAX", "STAY", "STAZ")

# FILE/REFERENCE keys and the attribute they fill
FILE_REFERENCE_KEYS = {
    "DESCRIPTION": "description",
    "OUTPUT": "output",
    "CONTACT": "contact",
    "SOFTWARE": "software",
    "HARDWARE": "hardware",
    "INPUT": "input",
}


@dataclass
class SinexHeader:
    """The %=SNX header line."""
    version: str = ""
    agency: str = ""
    creation_time: datetime | None = None
    data_provider: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    technique: ObservationTechnique = ObservationTechnique.GPS
    num_estimates: int = 0
    constraint_code: int = 0
    solution_types: list[str] = field(default_factory=list)

    @classmethod
    def decode(cls, cols: ColumnDecoder) -> SinexHeader:
        # %=SNX 2.02 IGN 20:225:43202 IGN 20:208:75600 20:210:43200 C  1577 2 S E
        return cls(
            version=cols.text("VERSION", 6, 10),
            agency=cols.text("AGENCY", 11, 14),
            creation_time=cols.epoch("CREATION_TIME", 15, 27),
            data_provider=cols.text("DATA_AGENCY", 28, 31),
            start_time=cols.epoch("DATA_START", 32, 44),
            end_time=cols.epoch("DATA_END", 45, 57),
            technique=cols.choice("OBS_TECHNIQUE", 58, 59, TECHNIQUE_CODES),
            num_estimates=cols.integer("NUM_ESTIMATES", 60, 65),
            constraint_code=cols.integer("CONSTRAINT_CODE", 66, 67),
            solution_types=cols.raw(68).split(),
        )


@dataclass
class FileReference:
    """Organisation, contact, software and hardware behind the file."""
    description: str = ""
    output: str = ""
    contact: str = ""
    software: str = ""
    hardware: str = ""
    input: str = ""


@dataclass
class SiteIdRecord:
    """SITE/ID: general information for each site."""
    code: str
    point_code: str
    domes_number: str
    technique: ObservationTechnique
    description: str
    longitude: str  # DDD MM SS.S as written
    latitude: str
    height: float

    @classmethod
    def decode(cls, cols: ColumnDecoder) -> SiteIdRecord:
        # *CODE PT __DOMES__ T _STATION DESCRIPTION__ _LONGITUDE_ _LATITUDE__ HEIGHT_
        #  ABMF  A 97103M001 P Les Abymes - Raizet ai 298 28 20.9  16 15 44.3   -25.6
        return cls(
            code=cols.clean("CODE", 1, 5),
            point_code=cols.clean("PT", 6, 8),
            domes_number=cols.clean("DOMES", 9, 18),
            technique=cols.choice("T", 19, 20, TECHNIQUE_CODES),
            description=cols.text("DESCRIPTION", 21, 43),
            longitude=cols.text("LONGITUDE", 44, 55),
            latitude=cols.text("LATITUDE", 56, 67),
            height=cols.number("HEIGHT", 68),
        )


@dataclass
class ReceiverRecord:
    """SITE/RECEIVER entry."""
    site_code: str
    point_code: str
    solution_id: str
    technique: ObservationTechnique
    date_installed: datetime | None
    date_removed: datetime | None
    receiver_type: str
    serial_number: str
    firmware_version: str

    @classmethod
    def decode(cls, cols: ColumnDecoder) -> ReceiverRecord:
        # *SITE PT SOLN T DATA_START__ DATA_END____ DESCRIPTION_________ S/N__ FIRMWARE___
        return cls(
            site_code=cols.clean("SITE", 1, 5),
            point_code=cols.clean("PT", 6, 8),
            solution_id=cols.clean("SOLN", 9, 13),
            technique=cols.choice("T", 14, 15, TECHNIQUE_CODES),
            date_installed=cols.epoch("DATA_START", 16, 28),
            date_removed=cols.epoch("DATA_END", 29, 41),
            receiver_type=cols.clean("DESCRIPTION", 42, 62),
            serial_number=cols.clean("S/N", 63, 68),
            firmware_version=cols.clean("FIRMWARE", 69),
        )

    def to_receiver(self) -> Receiver:
        return Receiver(
            receiver_type=self.receiver_type,
            serial_number=self.serial_number,
            firmware_version=self.firmware_version,
            date_installed=self.date_installed,
            date_removed=self.date_removed,
        )


@dataclass
class AntennaRecord:
    """SITE/ANTENNA entry."""
    site_code: str
    point_code: str
    solution_id: str
    technique: ObservationTechnique
    date_installed: datetime | None
    date_removed: datetime | None
    antenna_type: str
    radome_type: str
    serial_number: str

    @classmethod
    def decode(cls, cols: ColumnDecoder) -> AntennaRecord:
        # *SITE PT SOLN T DATA_START__ DATA_END____ DESCRIPTION_________ S/N__
        radome = cols.clean("RADOME", 58, 62)
        return cls(
            site_code=cols.clean("SITE", 1, 5),
            point_code=cols.clean("PT", 6, 8),
            solution_id=cols.clean("SOLN", 9, 13),
            technique=cols.choice("T", 14, 15, TECHNIQUE_CODES),
            date_installed=cols.epoch("DATA_START", 16, 28),
            date_removed=cols.epoch("DATA_END", 29, 41),
            antenna_type=cols.clean("DESCRIPTION", 42, 62),
            radome_type=radome if len(radome) == 4 else "",
            serial_number=cols.clean("S/N", 63),
        )

    def to_antenna(self) -> Antenna:
        return Antenna(
            antenna_type=self.antenna_type,
            radome_type=self.radome_type,
            serial_number=self.serial_number,
            date_installed=self.date_installed,
            date_removed=self.date_removed,
        )


@dataclass
class EstimateRecord:
    """SOLUTION/ESTIMATE parameter."""
    index: int
    parameter_type: str
    site_code: str
    point_code: str
    solution_id: str
    epoch: datetime | None
    unit: str
    constraint_code: str
    value: float
    stddev: float = 0.0

    @classmethod
    def decode(cls, cols: ColumnDecoder) -> EstimateRecord:
        # *INDEX TYPE__ CODE PT SOLN _REF_EPOCH__ UNIT S __ESTIMATED VALUE____ _STD_DEV___
        stddev = 0.0
        if len(cols) >= 70:
            stddev = cols.number("STD_DEV", 69, 80)
        return cls(
            index=cols.integer("INDEX", 1, 6),
            parameter_type=cols.text("TYPE", 7, 13),
            site_code=cols.clean("CODE", 14, 18),
            point_code=cols.clean("PT", 19, 21),
            solution_id=cols.clean("SOLN", 22, 26),
            epoch=cols.epoch("REF_EPOCH", 27, 39),
            unit=cols.text("UNIT", 40, 44),
            constraint_code=cols.text("S", 45, 46),
            value=cols.number("ESTIMATED_VALUE", 47, 68),
            stddev=stddev,
        )

    def same_meta(self, other: EstimateRecord) -> bool:
        """Same site, point, solution, epoch and unit."""
        return (
            self.site_code == other.site_code
            and self.point_code == other.point_code
            and self.solution_id == other.solution_id
            and self.epoch == other.epoch
            and self.unit == other.unit
        )


@dataclass
class DiscontinuityRecord:
    """SOLUTION/DISCONTINUITY entry (IGS extension of the format)."""
    site_code: str
    point_code: str
    index: int  # solution number, not the estimate index
    discontinuity_type: DiscontinuityType
    start_time: datetime | None
    end_time: datetime | None
    event: str

    @classmethod
    def decode(cls, cols: ColumnDecoder) -> DiscontinuityRecord:
        # *CODE PT SOLN T _DATA_START_ __DATA_END__ M __DESCRIPTION__
        return cls(
            site_code=cols.clean("CODE", 1, 5),
            point_code=cols.clean("PT", 6, 8),
            index=cols.integer("SOLN", 9, 13),
            start_time=cols.epoch("DATA_START", 16, 28),
            end_time=cols.epoch("DATA_END", 29, 41),
            discontinuity_type=cols.choice("M", 42, 43, DISCONTINUITY_CODES),
            event=cols.text("DESCRIPTION", 46),
        )


# Record decoders by block name
RECORD_TYPES = {
    SinexBlock.SITE_ID: SiteIdRecord,
    SinexBlock.SITE_RECEIVER: ReceiverRecord,
    SinexBlock.SITE_ANTENNA: AntennaRecord,
    SinexBlock.SOLUTION_ESTIMATE: EstimateRecord,
    SinexBlock.SOLUTION_DISCONTINUITY: DiscontinuityRecord,
}


@dataclass
class StationCoordinates:
    """XYZ coordinates of one station and epoch."""
    site_code: str = ""
    point_code: str = ""
    solution_id: str = ""
    epoch: datetime | None = None
    unit: str = ""
    constraint_code: str = ""
    values: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    stddev: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])


def all_station_coordinates(
    estimates: Iterable[EstimateRecord],
) -> Iterator[StationCoordinates]:
    """Group STAX/STAY/STAZ estimates into station coordinates.

    Consecutive coordinate estimates with the same metadata form one
    station; other parameter types are skipped.

    Args:
        estimates: SOLUTION/ESTIMATE records in file order

    Yields:
        StationCoordinates per station and epoch
    """
    crd: StationCoordinates | None = None
    last: EstimateRecord | None = None

    for est in estimates:
        if est.parameter_type not in COORDINATE_PARAMETERS:
            continue

        if last is None or not last.same_meta(est):
            if crd is not None:
                yield crd
            crd = StationCoordinates(
                site_code=est.site_code,
                point_code=est.point_code,
                solution_id=est.solution_id,
                epoch=est.epoch,
                unit=est.unit,
                constraint_code=est.constraint_code,
            )

        axis = COORDINATE_PARAMETERS.index(est.parameter_type)
        crd.values[axis] = est.value
        crd.stddev[axis] = est.stddev
        last = est

    if crd is not None:
        yield crd

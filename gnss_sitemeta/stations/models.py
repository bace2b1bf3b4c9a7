"""
Station metadata model.

Dataclasses for a GNSS site as described by an IGS sitelog: identification,
location, the receiver and antenna histories and the descriptive sections
(local ties, frequency standards, collocation, meteorological sensors,
episodic effects, contacts, more information).

Unset timestamps are None. An unset removal date means the device is still
installed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from gnss_sitemeta.utils.dates import FAR_FUTURE
from gnss_sitemeta.utils.multi_gnss import SatelliteSystem


@dataclass
class SiteWarning:
    """Non-fatal issue found while decoding or cleaning."""
    message: str
    line: int | None = None
    block: int | str | None = None

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


@dataclass
class TimeRange:
    """Installed/removed span of a device."""
    installed: datetime | None = None
    removed: datetime | None = None

    @property
    def is_open(self) -> bool:
        """True while the device is still in service."""
        return self.removed is None

    def effective_end(self, far_future: datetime = FAR_FUTURE) -> datetime:
        """Removal date, with open ranges mapped to the far-future sentinel."""
        return self.removed if self.removed is not None else far_future

    def contains(self, when: datetime) -> bool:
        if self.installed is None or when < self.installed:
            return False
        return self.removed is None or when <= self.removed


@dataclass
class EffectiveDates:
    """Validity span of a sensor or standard (sitelog 'Effective Dates')."""
    start: datetime | None = None
    end: datetime | None = None


# =============================================================================
# Equipment
# =============================================================================

@dataclass
class Receiver:
    """GNSS receiver entry of the station history (sitelog section 3)."""
    receiver_type: str = ""
    satellite_systems: list[SatelliteSystem] = field(default_factory=list)
    serial_number: str = ""
    firmware_version: str = ""
    elevation_cutoff: float = 0.0
    temperature_stabilization: str = ""
    date_installed: datetime | None = None
    date_removed: datetime | None = None
    notes: str = ""

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.date_installed, self.date_removed)

    def equivalent(self, other: Receiver, ignore_firmware: bool = False) -> bool:
        """Whether a swap to ``other`` changes the station configuration.

        Type, serial number and firmware are significant; some station
        information generators disregard the firmware.
        """
        same = (
            self.receiver_type == other.receiver_type
            and self.serial_number == other.serial_number
        )
        if ignore_firmware:
            return same
        return same and self.firmware_version == other.firmware_version


@dataclass
class Antenna:
    """GNSS antenna entry of the station history (sitelog section 4)."""
    antenna_type: str = ""
    serial_number: str = ""
    reference_point: str = ""
    ecc_up: float = 0.0
    ecc_north: float = 0.0
    ecc_east: float = 0.0
    alignment_from_true_north: float = 0.0
    radome_type: str = ""
    radome_serial_number: str = ""
    cable_type: str = ""
    cable_length: float = 0.0
    date_installed: datetime | None = None
    date_removed: datetime | None = None
    notes: str = ""

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.date_installed, self.date_removed)

    def equivalent(self, other: Antenna) -> bool:
        """Whether a swap to ``other`` changes the station configuration."""
        return (
            self.antenna_type == other.antenna_type
            and self.radome_type == other.radome_type
            and self.serial_number == other.serial_number
            and self.ecc_north == other.ecc_north
            and self.ecc_east == other.ecc_east
            and self.ecc_up == other.ecc_up
        )


# =============================================================================
# Descriptive sections
# =============================================================================

@dataclass
class FormInformation:
    """Section 0: who prepared the log and why."""
    prepared_by: str = ""
    date_prepared: datetime | None = None
    report_type: str = ""
    previous_site_log: str = ""
    modified_sections: str = ""


@dataclass
class SiteIdentification:
    """Section 1: identification of the GNSS monument."""
    site_name: str = ""
    four_character_id: str = ""
    nine_character_id: str = ""
    monument_inscription: str = ""
    iers_domes_number: str = ""
    cdp_number: str = ""
    monument_description: str = ""
    height_of_monument: float = 0.0
    monument_foundation: str = ""
    foundation_depth: float = 0.0
    marker_description: str = ""
    date_installed: datetime | None = None
    geologic_characteristic: str = ""
    bedrock_type: str = ""
    bedrock_condition: str = ""
    fracture_spacing: str = ""
    fault_zones_nearby: str = ""
    distance_activity: str = ""
    notes: str = ""


@dataclass
class ApproximatePosition:
    """Approximate ITRF position; geodetic angles as written (+DDMMSS.SS)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: float = 0.0


@dataclass
class SiteLocation:
    """Section 2: site location information."""
    city: str = ""
    state: str = ""
    country: str = ""
    tectonic_plate: str = ""
    position: ApproximatePosition = field(default_factory=ApproximatePosition)
    notes: str = ""


@dataclass
class SurveyedLocalTie:
    """Section 5: tie to another marker."""
    marker_name: str = ""
    marker_usage: str = ""
    marker_cdp_number: str = ""
    marker_domes_number: str = ""
    dx: float = 0.0  # Differential components (m)
    dy: float = 0.0
    dz: float = 0.0
    accuracy_mm: float = 0.0
    survey_method: str = ""
    date_measured: datetime | None = None
    notes: str = ""


@dataclass
class FrequencyStandard:
    """Section 6."""
    standard_type: str = ""
    input_frequency: str = ""
    effective_dates: EffectiveDates = field(default_factory=EffectiveDates)
    notes: str = ""


@dataclass
class CollocationInformation:
    """Section 7."""
    instrument_type: str = ""
    status: str = ""
    effective_dates: EffectiveDates = field(default_factory=EffectiveDates)
    notes: str = ""


class MetSensorKind(str, Enum):
    """Meteorological sensor sub-sections 8.1 - 8.4."""
    HUMIDITY = "8.1"
    PRESSURE = "8.2"
    TEMPERATURE = "8.3"
    WATER_VAPOR = "8.4"


@dataclass
class MeteorologicalSensor:
    """Section 8 sensor; fields not used by a kind stay at their zero value."""
    kind: MetSensorKind
    model: str = ""
    manufacturer: str = ""
    serial_number: str = ""
    data_sampling_interval: float = 0.0  # seconds
    accuracy: float = 0.0
    aspiration: str = ""
    height_diff_to_antenna: float = 0.0
    distance_to_antenna: float = 0.0  # water vapor radiometers
    calibration_date: datetime | None = None
    effective_dates: EffectiveDates = field(default_factory=EffectiveDates)
    notes: str = ""


@dataclass
class LocalEpisodicEffect:
    """Section 10: event that may affect data quality."""
    effective_dates: EffectiveDates = field(default_factory=EffectiveDates)
    event: str = ""


@dataclass
class ContactParty:
    """One contact of sections 11 and 12."""
    agency: str = ""
    abbreviation: str = ""
    mailing_address: list[str] = field(default_factory=list)
    contact_name: str = ""
    telephones: list[str] = field(default_factory=list)
    faxes: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)


@dataclass
class MoreInformation:
    """Section 13."""
    primary_data_center: str = ""
    secondary_data_center: str = ""
    url: str = ""
    site_map: str = ""
    site_diagram: str = ""
    horizon_mask: str = ""
    monument_description: str = ""
    site_pictures: str = ""
    notes: str = ""


# =============================================================================
# Site aggregate
# =============================================================================

@dataclass
class Site:
    """A GNSS site with its complete equipment history.

    The receiver and antenna lists are chronological and only have their
    dates changed by the history cleaner.
    """
    form: FormInformation = field(default_factory=FormInformation)
    identification: SiteIdentification = field(default_factory=SiteIdentification)
    location: SiteLocation = field(default_factory=SiteLocation)

    receivers: list[Receiver] = field(default_factory=list)
    antennas: list[Antenna] = field(default_factory=list)

    local_ties: list[SurveyedLocalTie] = field(default_factory=list)
    frequency_standards: list[FrequencyStandard] = field(default_factory=list)
    collocations: list[CollocationInformation] = field(default_factory=list)
    humidity_sensors: list[MeteorologicalSensor] = field(default_factory=list)
    pressure_sensors: list[MeteorologicalSensor] = field(default_factory=list)
    temperature_sensors: list[MeteorologicalSensor] = field(default_factory=list)
    water_vapor_sensors: list[MeteorologicalSensor] = field(default_factory=list)
    episodic_effects: list[LocalEpisodicEffect] = field(default_factory=list)
    contacts: list[ContactParty] = field(default_factory=list)
    responsible_agencies: list[ContactParty] = field(default_factory=list)
    more_information: MoreInformation = field(default_factory=MoreInformation)

    warnings: list[SiteWarning] = field(default_factory=list)
    source_file: str = ""

    @property
    def station_id(self) -> str:
        """Nine character ID, falling back to the four character ID."""
        ident = self.identification
        return ident.nine_character_id or ident.four_character_id

    @property
    def four_character_id(self) -> str:
        ident = self.identification
        if ident.four_character_id:
            return ident.four_character_id
        return ident.nine_character_id[:4]

    @property
    def domes_number(self) -> str:
        return self.identification.iers_domes_number

    def sensors(self, kind: MetSensorKind) -> list[MeteorologicalSensor]:
        """Sensor list for one meteorological sub-section."""
        return {
            MetSensorKind.HUMIDITY: self.humidity_sensors,
            MetSensorKind.PRESSURE: self.pressure_sensors,
            MetSensorKind.TEMPERATURE: self.temperature_sensors,
            MetSensorKind.WATER_VAPOR: self.water_vapor_sensors,
        }[kind]

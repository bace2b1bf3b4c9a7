"""
IGS Site Log Parser.

Decodes IGS/GNSS site log ASCII files into a Site: station identification,
location, the receiver and antenna history and the descriptive sections.

The log is read in a single forward pass. Each numbered block ("3.   GNSS
Receiver Information") selects a handler; every line of the block is
classified into an entry and dispatched to it. A blank line is the commit
boundary that stores the record in progress.

Values that feed the equipment history (dates, eccentricities, positions)
must parse or decoding fails with a FormatError. Descriptive values that
fail to parse are reported as warnings on the Site and left at zero.

Usage:
    from gnss_sitemeta.stations.site_log_parser import parse_site_log

    site = parse_site_log("brux00bel_20200225.log")
    for receiver in site.receivers:
        print(receiver.receiver_type, receiver.date_installed)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import Callable, Iterable

from gnss_sitemeta.core.config import SitelogConfig
from gnss_sitemeta.core.exceptions import (
    DuplicateBlockError,
    FormatError,
    SiteMetaError,
    UnknownFieldError,
)
from gnss_sitemeta.stations.models import (
    Antenna,
    CollocationInformation,
    ContactParty,
    EffectiveDates,
    FrequencyStandard,
    LocalEpisodicEffect,
    MeteorologicalSensor,
    MetSensorKind,
    Receiver,
    Site,
    SiteWarning,
    SurveyedLocalTie,
)
from gnss_sitemeta.utils.dates import UTC
from gnss_sitemeta.utils.logging import get_logger
from gnss_sitemeta.utils.multi_gnss import parse_satellite_systems

logger = get_logger(__name__)


ADDITIONAL_INFORMATION = "Additional Information"

# Lines without a field that the block handlers understand
TEXT_HEADINGS = (
    "Antenna Graphics with Dimensions",
    "Differential Components",
    "Primary Contact",
    "Secondary Contact",
)

# Legacy log names look like "brux_20200225.log"
LEGACY_FILENAME_LENGTH = 17

SITE_NAME_PATTERN = re.compile(r'(?i)([A-Z0-9]{4})(\d)(\d)([A-Z]{3})')


class SitelogBlock(IntEnum):
    """Numbered blocks of a site log; IGNORE skips preambles and templates."""

    IGNORE = -1
    FORM = 0
    IDENTIFICATION = 1
    LOCATION = 2
    RECEIVER = 3
    ANTENNA = 4
    LOCAL_TIES = 5
    FREQUENCY_STANDARD = 6
    COLLOCATION = 7
    METEOROLOGICAL = 8
    EPISODIC_EFFECTS = 10
    CONTACT = 11
    RESPONSIBLE_AGENCY = 12
    MORE_INFORMATION = 13

    @classmethod
    def from_number(cls, number: int) -> SitelogBlock:
        """Block for a header number; unmodeled blocks (e.g. 9) are ignored."""
        try:
            return cls(number)
        except ValueError:
            return cls.IGNORE


class EntryKind(Enum):
    BLANK = "blank"                # commit boundary
    FIELD = "field"                # key : value
    CONTINUATION = "continuation"  # long free-text line of Additional Information
    TEXT = "text"                  # anything else, e.g. "Secondary Contact"


@dataclass
class Entry:
    """One classified line of a site log block."""
    kind: EntryKind
    key: str
    value: str
    line: str
    line_number: int
    block: int


# =============================================================================
# Value parsing
# =============================================================================

def parse_float(value: str) -> float:
    """Parse a numeric sitelog value.

    Units, placeholders and parentheses around the number are removed and a
    decimal comma is accepted. "unknown" and empty values are 0.

    Args:
        value: e.g. "2.5 m", "(m)", "0,0012"

    Returns:
        Parsed value

    Raises:
        ValueError: If what remains is not a number
    """
    if value.lower() == "unknown":
        return 0.0
    if value in ("(+/-DDDMMSS.SS)", "(+/-DDMMSS.SS)"):
        return 0.0

    value = value.replace(",", ".").strip(" %()acCdDeEgGhKlmMNOPrstUWw")
    if not value:
        return 0.0
    return float(value)


def parse_date(value: str) -> datetime | None:
    """Parse a sitelog date or datetime.

    Accepts the forms found in practice: CCYY, CCYY-MM, CCYY-MM-DD,
    "CCYY-MM-DD hh:mm", CCYY-MM-DDThh:mm:ssZ and CCYY-MM-DDThh:mmZ. Template
    placeholders and "NONE" yield None, a "DD" placeholder day becomes 01.

    Args:
        value: Date string

    Returns:
        UTC datetime or None

    Raises:
        ValueError: If the string is not a date
    """
    if "CCYY" in value or "YYYY" in value:
        return None

    if value.endswith("Thh:mmZ"):
        value = value[:-len("Thh:mmZ")]
    value = value.strip(" ()NOE")
    if not value:
        return None

    value = value.replace("DD", "01")

    n = len(value)
    if n == 4:
        dt = datetime.strptime(value, "%Y")
    elif n == 7:
        dt = datetime.strptime(value, "%Y-%m")
    elif 8 <= n <= 10:
        dt = datetime.strptime(value, "%Y-%m-%d")
    elif n == 16:
        dt = datetime.strptime(value.replace("T", " ", 1), "%Y-%m-%d %H:%M")
    elif n == 20:
        dt = datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ")
    else:
        dt = datetime.strptime(value, "%Y-%m-%dT%H:%MZ")
    return dt.replace(tzinfo=UTC)


def parse_effective_dates(value: str) -> EffectiveDates:
    """Parse "CCYY-MM-DD/CCYY-MM-DD"; a missing end stays open."""
    parts = value.split("/", 1)
    dates = EffectiveDates(start=parse_date(parts[0]))
    if len(parts) == 2 and parts[1]:
        dates.end = parse_date(parts[1])
    return dates


def add_multiple_line(note: str, text: str) -> str:
    """Append a line of free text, dropping "(multiple lines)" templates."""
    if "multiple lines" in text:
        return note
    if note:
        return f"{note} {text}"
    return text


def id_by_filename(filename: str) -> str:
    """Extract the station ID from an IGS sitelog filename.

    "wtzr00deu_20231030.log" gives WTZR00DEU, the legacy
    "wtzr_20231030.log" gives WTZR.

    Args:
        filename: File name without directory

    Returns:
        Upper case ID, empty if the name does not follow the conventions
    """
    filename = filename.strip()
    if len(filename) == LEGACY_FILENAME_LENGTH:
        return filename[:4].upper()

    match = SITE_NAME_PATTERN.search(filename)
    if not match:
        return ""
    return match.group(0).upper()


def _required(entry: Entry, parse: Callable):
    try:
        return parse(entry.value)
    except ValueError as e:
        raise FormatError(
            entry.key, entry.value, e, line=entry.line_number, block=entry.block
        ) from e


def _optional(entry: Entry, parse: Callable, warnings: list[SiteWarning], default=0.0):
    try:
        return parse(entry.value)
    except ValueError as e:
        warnings.append(SiteWarning(
            f"could not parse {entry.key} {entry.value!r}: {e}",
            entry.line_number,
            entry.block,
        ))
        return default


# =============================================================================
# Decoder
# =============================================================================

@dataclass
class DecodeState:
    """Position of the decoder and the records in progress."""
    block: SitelogBlock = SitelogBlock.IGNORE
    key: str = ""
    sub_block: str = ""
    seen_sub_blocks: set[str] = field(default_factory=set)

    receiver: Receiver = field(default_factory=Receiver)
    antenna: Antenna = field(default_factory=Antenna)
    tie: SurveyedLocalTie = field(default_factory=SurveyedLocalTie)
    frequency: FrequencyStandard = field(default_factory=FrequencyStandard)
    collocation: CollocationInformation = field(default_factory=CollocationInformation)
    sensor: MeteorologicalSensor | None = None
    effect: LocalEpisodicEffect = field(default_factory=LocalEpisodicEffect)
    party: ContactParty = field(default_factory=ContactParty)


Handler = Callable[[Site, DecodeState, Entry], "tuple[SitelogBlock, list[SiteWarning]]"]


class SiteLogParser:
    """
    Parse IGS site log ASCII files.

    A parser holds no state between calls; one instance may decode any
    number of logs.
    """

    # Main block, e.g. '1.   Site Identification of the GNSS Monument'
    BLOCK_PATTERN = re.compile(r'^(\d+)\.\s+([\w\s]+)')

    # Template sub block, e.g. '4.x  Antenna Type : (A20, from rcvr_ant.tab)'
    DUMMY_BLOCK_PATTERN = re.compile(r'^(\d+\.[xX])\s+(.*)')

    FORM_KEYS = {
        "Prepared by": "prepared_by",
        "Prepared by (full name)": "prepared_by",
        "Report Type": "report_type",
        "Previous Site Log": "previous_site_log",
        "Modified/Added Sections": "modified_sections",
    }

    IDENTIFICATION_KEYS = {
        "Site Name": "site_name",
        "Monument Inscription": "monument_inscription",
        "CDP Number": "cdp_number",
        "Monument Description": "monument_description",
        "Monument Foundation": "monument_foundation",
        "Marker Description": "marker_description",
        "Geologic Characteristic": "geologic_characteristic",
        "Bedrock Type": "bedrock_type",
        "Bedrock Condition": "bedrock_condition",
        "Fracture Spacing": "fracture_spacing",
        "Fault zones nearby": "fault_zones_nearby",
    }

    MORE_INFORMATION_KEYS = {
        "Primary Data Center": "primary_data_center",
        "Secondary Data Center": "secondary_data_center",
        "URL for More Information": "url",
        "Site Map": "site_map",
        "Site Diagram": "site_diagram",
        "Horizon Mask": "horizon_mask",
        "Monument Description": "monument_description",
        "Site Pictures": "site_pictures",
    }

    def __init__(self, config: SitelogConfig | None = None):
        self.config = config or SitelogConfig()
        self._handlers: dict[SitelogBlock, Handler] = {
            SitelogBlock.FORM: self._decode_form,
            SitelogBlock.IDENTIFICATION: self._decode_identification,
            SitelogBlock.LOCATION: self._decode_location,
            SitelogBlock.RECEIVER: self._decode_receiver,
            SitelogBlock.ANTENNA: self._decode_antenna,
            SitelogBlock.LOCAL_TIES: self._decode_local_tie,
            SitelogBlock.FREQUENCY_STANDARD: self._decode_frequency_standard,
            SitelogBlock.COLLOCATION: self._decode_collocation,
            SitelogBlock.METEOROLOGICAL: self._decode_met_sensor,
            SitelogBlock.EPISODIC_EFFECTS: self._decode_episodic_effect,
            SitelogBlock.CONTACT: self._decode_contact,
            SitelogBlock.RESPONSIBLE_AGENCY: self._decode_contact,
            SitelogBlock.MORE_INFORMATION: self._decode_more_information,
        }

    def parse_file(self, file_path: str | Path) -> Site:
        """
        Parse a site log file.

        The station ID is taken from the file name when the log itself
        carries neither a four nor a nine character ID.

        Args:
            file_path: Path to the ASCII site log file

        Returns:
            Decoded Site
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Site log file not found: {file_path}")

        content = file_path.read_text(encoding="utf-8", errors="replace")
        site = self.parse_content(content, str(file_path))

        ident = site.identification
        if not ident.four_character_id and not ident.nine_character_id:
            station_id = id_by_filename(file_path.name)
            if len(station_id) == 9:
                ident.nine_character_id = station_id
            ident.four_character_id = station_id[:4]

        return site

    def parse_content(self, content: str, source_file: str = "") -> Site:
        """
        Parse site log content.

        Args:
            content: ASCII site log content
            source_file: Source file path for reference

        Returns:
            Decoded Site
        """
        content = content.replace("\r\n", "\n").replace("\r", "\n")
        site = self.parse_lines(content.split("\n"))
        site.source_file = source_file
        return site

    def parse_lines(self, lines: Iterable[str]) -> Site:
        """Decode a site log from its lines.

        Raises:
            FormatError: On structural problems or unparsable required values
        """
        site = Site()
        state = DecodeState()

        line_number = 0
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")

            if not line.strip():
                state.key = ""
                entry = Entry(EntryKind.BLANK, "", "", line, line_number, int(state.block))
            else:
                match = self.BLOCK_PATTERN.match(line)
                if match:
                    self._enter_block(
                        site, state, SitelogBlock.from_number(int(match.group(1))), line_number
                    )
                    continue

                if self.DUMMY_BLOCK_PATTERN.match(line):
                    self._enter_block(site, state, SitelogBlock.IGNORE, line_number)
                    continue

                if state.block is SitelogBlock.IGNORE:
                    continue

                entry, warnings = self._classify(line, line_number, state)
                site.warnings.extend(warnings)
                if entry is None:
                    continue

            self._dispatch(site, state, entry)

        self._enter_block(site, state, SitelogBlock.IGNORE, line_number + 1)
        return site

    def _classify(
        self, line: str, line_number: int, state: DecodeState
    ) -> tuple[Entry | None, list[SiteWarning]]:
        """Turn a non-blank line into an entry of the current block.

        The key of a field is kept across lines with an empty key so that
        continuation lines (": more text") belong to the previous field. A
        field without value is not dispatched.
        """
        width = self.config.key_column_width
        block = int(state.block)
        idx = line.find(":")

        if 0 < idx < width:
            key = line[:idx].strip()
            if key:
                state.key = key
            value = line[idx + 1:].strip()
            if not value:
                return None, []
            return Entry(EntryKind.FIELD, state.key, value, line, line_number, block), []

        if state.key == ADDITIONAL_INFORMATION and len(line) > width:
            return Entry(
                EntryKind.CONTINUATION, state.key, line.strip(), line, line_number, block
            ), []

        if idx >= width:
            logger.debug("line_skipped", line=line_number, block=block, reason="colon beyond key column")
            return None, [SiteWarning(f"could not handle line {line!r}", line_number, block)]

        text = line.strip()
        if len(line) > width and not text.startswith(TEXT_HEADINGS):
            logger.debug("line_skipped", line=line_number, block=block, reason="no field")
            return None, [SiteWarning(f"could not handle line {line!r}", line_number, block)]

        return Entry(EntryKind.TEXT, state.key, text, line, line_number, block), []

    def _dispatch(self, site: Site, state: DecodeState, entry: Entry) -> None:
        if state.block is SitelogBlock.IGNORE:
            return
        next_block, warnings = self._handlers[state.block](site, state, entry)
        site.warnings.extend(warnings)
        if next_block is not state.block:
            self._enter_block(site, state, next_block, entry.line_number)

    def _enter_block(
        self, site: Site, state: DecodeState, block: SitelogBlock, line_number: int
    ) -> None:
        """Commit the record in progress and switch to another block."""
        if state.block is not SitelogBlock.IGNORE:
            commit = Entry(EntryKind.BLANK, "", "", "", line_number, int(state.block))
            handler = self._handlers[state.block]
            _, warnings = handler(site, state, commit)
            site.warnings.extend(warnings)

        if block in (SitelogBlock.CONTACT, SitelogBlock.RESPONSIBLE_AGENCY):
            state.party = ContactParty()
        state.block = block
        state.key = ""
        state.sub_block = ""
        logger.debug("block_started", block=int(block), line=line_number)

    def _start_sub_block(self, state: DecodeState, entry: Entry, item: str) -> None:
        sub_block = entry.key.split()[0]
        if sub_block in state.seen_sub_blocks:
            raise DuplicateBlockError(sub_block, line=entry.line_number, item=item)
        state.seen_sub_blocks.add(sub_block)
        state.sub_block = sub_block

    # -------------------------------------------------------------------------
    # Block handlers
    # -------------------------------------------------------------------------

    def _decode_form(self, site, state, entry):
        form = site.form
        if entry.kind in (EntryKind.BLANK, EntryKind.TEXT):
            return state.block, []

        if entry.key in self.FORM_KEYS:
            setattr(form, self.FORM_KEYS[entry.key], entry.value)
        elif entry.key == "Date Prepared":
            form.date_prepared = _required(entry, parse_date)
        else:
            raise UnknownFieldError(entry.key, line=entry.line_number, block=entry.block)
        return state.block, []

    def _decode_identification(self, site, state, entry):
        ident = site.identification
        warnings: list[SiteWarning] = []
        if entry.kind in (EntryKind.BLANK, EntryKind.TEXT):
            return state.block, warnings

        key, val = entry.key, entry.value
        if key in self.IDENTIFICATION_KEYS:
            setattr(ident, self.IDENTIFICATION_KEYS[key], val)
        elif key == "Four Character ID":
            ident.four_character_id = val.upper()
        elif key == "Nine Character ID":
            ident.nine_character_id = val.upper()
            if not ident.four_character_id and len(val) >= 9:
                ident.four_character_id = ident.nine_character_id[:4]
        elif key == "IERS DOMES Number":
            if len(val) != 9:
                warnings.append(SiteWarning(
                    f"{key!r} should be 9 character long: {val!r}", entry.line_number, entry.block
                ))
            ident.iers_domes_number = val
        elif key == "Height of the Monument":
            ident.height_of_monument = _optional(entry, parse_float, warnings)
        elif key == "Foundation Depth":
            ident.foundation_depth = _optional(entry, parse_float, warnings)
        elif key == "Date Installed":
            ident.date_installed = _required(entry, parse_date)
        elif key == "Distance/activity":
            ident.distance_activity = add_multiple_line(ident.distance_activity, val)
        elif key == ADDITIONAL_INFORMATION:
            ident.notes = add_multiple_line(ident.notes, val)
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_location(self, site, state, entry):
        location = site.location
        position = location.position
        warnings: list[SiteWarning] = []
        if entry.kind in (EntryKind.BLANK, EntryKind.TEXT):
            return state.block, warnings

        key, val = entry.key, entry.value
        if key == "City or Town":
            location.city = val
        elif key == "State or Province":
            location.state = val
        elif key == "Country":
            location.country = val
        elif key == "Country or Region":
            if len(val) == 3:
                location.country = val.upper()
            else:
                warnings.append(SiteWarning(
                    f"{key!r} must be 3 character long: {val!r}", entry.line_number, entry.block
                ))
        elif key == "Tectonic Plate":
            location.tectonic_plate = val
        elif key == "X coordinate (m)":
            position.x = _required(entry, parse_float)
        elif key == "Y coordinate (m)":
            position.y = _required(entry, parse_float)
        elif key == "Z coordinate (m)":
            position.z = _required(entry, parse_float)
        elif key == "Latitude (N is +)":
            position.latitude = _optional(entry, parse_float, warnings)
        elif key == "Longitude (E is +)":
            position.longitude = _optional(entry, parse_float, warnings)
        elif key == "Elevation (m,ellips.)":
            if val != "(F7.1)":
                position.elevation = _required(entry, parse_float)
        elif key == ADDITIONAL_INFORMATION:
            location.notes = add_multiple_line(location.notes, val)
        elif key.startswith("Approximate Position"):
            pass
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_receiver(self, site, state, entry):
        warnings: list[SiteWarning] = []
        if entry.kind is EntryKind.BLANK:
            if state.receiver.receiver_type:
                site.receivers.append(state.receiver)
                state.receiver = Receiver()
            return state.block, warnings
        if entry.kind is EntryKind.TEXT:
            return state.block, warnings

        key, val = entry.key, entry.value
        recv = state.receiver
        if key.startswith("3."):
            self._start_sub_block(state, entry, "receiver block")
            state.receiver = Receiver(receiver_type=val)
        elif key == "Satellite System":
            recv.satellite_systems = _required(entry, parse_satellite_systems)
        elif key == "Serial Number":
            if len(val) > self.config.max_serial_length:
                warnings.append(SiteWarning(
                    f"Rec Serial Number too long: {val!r}", entry.line_number, entry.block
                ))
            recv.serial_number = val
        elif key == "Firmware Version":
            recv.firmware_version = val
        elif key == "Elevation Cutoff Setting":
            recv.elevation_cutoff = _optional(entry, parse_float, warnings)
        elif key == "Date Installed":
            recv.date_installed = _required(entry, parse_date)
        elif key == "Date Removed":
            recv.date_removed = _required(entry, parse_date)
        elif key == "Temperature Stabiliz.":
            recv.temperature_stabilization = val
        elif key == ADDITIONAL_INFORMATION:
            recv.notes = add_multiple_line(recv.notes, val)
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_antenna(self, site, state, entry):
        warnings: list[SiteWarning] = []
        if entry.kind is EntryKind.BLANK:
            if state.antenna.antenna_type:
                site.antennas.append(state.antenna)
                state.antenna = Antenna()
            return state.block, warnings
        if entry.kind is EntryKind.TEXT:
            return state.block, warnings

        key, val = entry.key, entry.value
        ant = state.antenna
        if key.startswith("4."):
            self._start_sub_block(state, entry, "antenna block")
            state.antenna = Antenna(antenna_type=val)
            if len(val) != self.config.antenna_type_length:
                warnings.append(SiteWarning(
                    f"ANT Type in {state.sub_block} is not "
                    f"{self.config.antenna_type_length} chars long: {val!r}",
                    entry.line_number,
                    entry.block,
                ))
        elif key == "Serial Number":
            if len(val) > self.config.max_serial_length:
                warnings.append(SiteWarning(
                    f"Ant Serial Number too long: {val!r}", entry.line_number, entry.block
                ))
            ant.serial_number = val
        elif key == "Antenna Reference Point":
            ant.reference_point = val
        elif key == "Marker->ARP Up Ecc. (m)":
            ant.ecc_up = _required(entry, parse_float)
        elif key == "Marker->ARP North Ecc(m)":
            ant.ecc_north = _required(entry, parse_float)
        elif key == "Marker->ARP East Ecc(m)":
            ant.ecc_east = _required(entry, parse_float)
        elif key == "Alignment from True N":
            ant.alignment_from_true_north = _optional(entry, parse_float, warnings)
        elif key == "Antenna Radome Type":
            if len(val) != 4:
                raise FormatError(
                    key, val, "antenna radome type must be 4 char long",
                    line=entry.line_number, block=entry.block,
                )
            ant.radome_type = val
        elif key == "Radome Serial Number":
            ant.radome_serial_number = val
        elif key == "Antenna Cable Type":
            ant.cable_type = val
        elif key == "Antenna Cable Length":
            ant.cable_length = _optional(entry, parse_float, warnings)
        elif key == "Date Installed":
            ant.date_installed = _required(entry, parse_date)
        elif key == "Date Removed":
            ant.date_removed = _required(entry, parse_date)
        elif key == ADDITIONAL_INFORMATION:
            ant.notes = add_multiple_line(ant.notes, val)
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_local_tie(self, site, state, entry):
        warnings: list[SiteWarning] = []
        if entry.kind is EntryKind.BLANK:
            if state.tie.marker_name:
                site.local_ties.append(state.tie)
                state.tie = SurveyedLocalTie()
            return state.block, warnings
        if entry.kind is EntryKind.TEXT:
            return state.block, warnings

        key, val = entry.key, entry.value
        tie = state.tie
        if key.startswith("5."):
            self._start_sub_block(state, entry, "local ties block")
            state.tie = SurveyedLocalTie(marker_name=val)
        elif key == "Tied Marker Usage":
            tie.marker_usage = val
        elif key == "Tied Marker CDP Number":
            tie.marker_cdp_number = val
        elif key in ("Tied Marker DOMES Number", "Tied Marker Domes Number"):
            tie.marker_domes_number = val
        elif key == "dx (m)":
            tie.dx = _required(entry, parse_float)
        elif key == "dy (m)":
            tie.dy = _required(entry, parse_float)
        elif key == "dz (m)":
            tie.dz = _required(entry, parse_float)
        elif key == "Accuracy (mm)":
            tie.accuracy_mm = _optional(entry, parse_float, warnings)
        elif key == "Survey method":
            tie.survey_method = val
        elif key == "Date Measured":
            tie.date_measured = _optional(entry, parse_date, warnings, default=None)
        elif key in (ADDITIONAL_INFORMATION, "Additional Informations"):
            tie.notes = add_multiple_line(tie.notes, val)
        elif key.startswith("Differential Components"):
            pass
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_frequency_standard(self, site, state, entry):
        if entry.kind is EntryKind.BLANK:
            if state.frequency.standard_type:
                site.frequency_standards.append(state.frequency)
                state.frequency = FrequencyStandard()
            return state.block, []
        if entry.kind is EntryKind.TEXT:
            return state.block, []

        key, val = entry.key, entry.value
        warnings: list[SiteWarning] = []
        freq = state.frequency
        if key.startswith("6."):
            self._start_sub_block(state, entry, "frequency standard block")
            state.frequency = FrequencyStandard(standard_type=val)
        elif key == "Input Frequency":
            freq.input_frequency = val
        elif key == "Effective Dates":
            freq.effective_dates = _optional(
                entry, parse_effective_dates, warnings, default=EffectiveDates()
            )
        elif key == "Notes":
            freq.notes = add_multiple_line(freq.notes, val)
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_collocation(self, site, state, entry):
        if entry.kind is EntryKind.BLANK:
            if state.collocation.instrument_type:
                site.collocations.append(state.collocation)
                state.collocation = CollocationInformation()
            return state.block, []
        if entry.kind is EntryKind.TEXT:
            return state.block, []

        key, val = entry.key, entry.value
        warnings: list[SiteWarning] = []
        if key.startswith("7."):
            if val == "NONE":
                state.sub_block = ""
                return state.block, warnings
            self._start_sub_block(state, entry, "collocation information block")
            state.collocation = CollocationInformation(instrument_type=val)
            return state.block, warnings

        # fields of a NONE entry
        if not state.sub_block:
            return state.block, warnings

        coll = state.collocation
        if key == "Status":
            coll.status = val
        elif key == "Effective Dates":
            coll.effective_dates = _optional(
                entry, parse_effective_dates, warnings, default=EffectiveDates()
            )
        elif key == "Notes":
            coll.notes = add_multiple_line(coll.notes, val)
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_met_sensor(self, site, state, entry):
        warnings: list[SiteWarning] = []
        if entry.kind is EntryKind.BLANK:
            sensor = state.sensor
            if sensor is not None and sensor.model:
                site.sensors(sensor.kind).append(sensor)
            state.sensor = None
            state.sub_block = ""
            return state.block, warnings
        if entry.kind is EntryKind.TEXT:
            return state.block, warnings

        key, val = entry.key, entry.value
        if key.startswith("8."):
            sub_block = key.split()[0]
            if sub_block.endswith(".x"):
                state.sub_block = sub_block
                return state.block, warnings
            self._start_sub_block(state, entry, "meteo sensor block")
            try:
                kind = MetSensorKind(sub_block[:3])
            except ValueError:
                # other instruments (8.5) are not modeled
                state.sensor = None
                return state.block, warnings
            state.sensor = MeteorologicalSensor(kind=kind, model=val)
            return state.block, warnings

        sensor = state.sensor
        if sensor is None or state.sub_block.endswith(".x"):
            return state.block, warnings

        kind = sensor.kind
        if key == "Manufacturer":
            sensor.manufacturer = val
        elif key == "Serial Number":
            sensor.serial_number = val
        elif key == "Data Sampling Interval" and kind is not MetSensorKind.WATER_VAPOR:
            sensor.data_sampling_interval = _optional(entry, parse_float, warnings)
        elif key in ("Accuracy", "Accuracy (% rel h)") and kind is not MetSensorKind.WATER_VAPOR:
            sensor.accuracy = _optional(entry, parse_float, warnings)
        elif key == "Aspiration" and kind in (MetSensorKind.HUMIDITY, MetSensorKind.TEMPERATURE):
            sensor.aspiration = val
        elif key == "Distance to Antenna" and kind is MetSensorKind.WATER_VAPOR:
            sensor.distance_to_antenna = _optional(entry, parse_float, warnings)
        elif key == "Height Diff to Ant":
            sensor.height_diff_to_antenna = _optional(entry, parse_float, warnings)
        elif key == "Calibration date":
            sensor.calibration_date = _optional(entry, parse_date, warnings, default=None)
        elif key == "Effective Dates":
            sensor.effective_dates = _optional(
                entry, parse_effective_dates, warnings, default=EffectiveDates()
            )
        elif key == "Notes":
            sensor.notes = add_multiple_line(sensor.notes, val)
        else:
            warnings.append(SiteWarning(
                f"unknown key {key!r} in {state.sub_block}", entry.line_number, entry.block
            ))
        return state.block, warnings

    def _decode_episodic_effect(self, site, state, entry):
        if entry.kind is EntryKind.BLANK:
            if state.effect.event:
                site.episodic_effects.append(state.effect)
                state.effect = LocalEpisodicEffect()
            return state.block, []
        if entry.kind is EntryKind.TEXT:
            return state.block, []

        key, val = entry.key, entry.value
        warnings: list[SiteWarning] = []
        if key.startswith("10."):
            self._start_sub_block(state, entry, "local episodic effect block")
            state.effect = LocalEpisodicEffect(
                effective_dates=_optional(
                    entry, parse_effective_dates, warnings, default=EffectiveDates()
                )
            )
        elif key == "Event":
            state.effect.event = add_multiple_line(state.effect.event, val)
        else:
            raise UnknownFieldError(key, line=entry.line_number, block=entry.block)
        return state.block, warnings

    def _decode_contact(self, site, state, entry):
        """Blocks 11 and 12: a primary and an optional secondary contact."""
        if state.block is SitelogBlock.CONTACT:
            parties = site.contacts
        else:
            parties = site.responsible_agencies
        party = state.party

        if "Secondary Contact" in entry.line:
            # Same agency, second person: store the primary and start over
            if party.agency or party.contact_name:
                parties.append(replace(party, mailing_address=list(party.mailing_address)))
            party.contact_name = ""
            party.telephones = []
            party.faxes = []
            party.emails = []
            return state.block, []

        if entry.kind is EntryKind.BLANK:
            if party.contact_name:
                parties.append(party)
                state.party = ContactParty()
            return state.block, []
        if entry.kind is EntryKind.TEXT:
            return state.block, []

        key, val = entry.key, entry.value
        if key.startswith(("11.", "12.")):
            pass
        elif key == "Agency":
            party.agency = add_multiple_line(party.agency, val)
        elif key == "Preferred Abbreviation":
            party.abbreviation = val
        elif key == "Mailing Address":
            party.mailing_address.append(val)
        elif key == "Contact Name":
            party.contact_name = val
        elif key in ("Telephone (primary)", "Telephone (secondary)"):
            party.telephones.append(val)
        elif key == "Fax":
            party.faxes.append(val)
        elif key == "E-mail":
            party.emails.append(val)
        return state.block, []

    def _decode_more_information(self, site, state, entry):
        if entry.line.strip() == "Antenna Graphics with Dimensions":
            return SitelogBlock.IGNORE, []
        if entry.kind in (EntryKind.BLANK, EntryKind.TEXT):
            return state.block, []

        info = site.more_information
        if entry.key in self.MORE_INFORMATION_KEYS:
            setattr(info, self.MORE_INFORMATION_KEYS[entry.key], entry.value)
        elif entry.key == ADDITIONAL_INFORMATION:
            info.notes = add_multiple_line(info.notes, entry.value)
        return state.block, []


def parse_site_log(file_path: str | Path, config: SitelogConfig | None = None) -> Site:
    """
    Convenience function to parse a site log file.

    Args:
        file_path: Path to the site log file
        config: Decoder settings, defaults if None

    Returns:
        Decoded Site
    """
    parser = SiteLogParser(config)
    return parser.parse_file(file_path)


def parse_site_logs_directory(
    directory: str | Path, config: SitelogConfig | None = None
) -> dict[str, Site]:
    """
    Parse all site log files in a directory.

    Logs that fail to decode are logged and skipped. If a station has more
    than one log, the most recently prepared one is kept.

    Args:
        directory: Path to directory containing .log files
        config: Decoder settings, defaults if None

    Returns:
        Dictionary mapping lower case four character ID to Site
    """
    directory = Path(directory)
    parser = SiteLogParser(config)
    results: dict[str, Site] = {}

    for log_file in sorted(directory.glob("*.log")):
        try:
            site = parser.parse_file(log_file)
        except (SiteMetaError, OSError) as e:
            logger.warning("sitelog_failed", file=str(log_file), error=str(e))
            continue

        station = site.four_character_id.lower()
        if not station:
            logger.warning("sitelog_without_station_id", file=str(log_file))
            continue

        existing = results.get(station)
        if existing is not None:
            existing_date = existing.form.date_prepared or datetime.min.replace(tzinfo=UTC)
            new_date = site.form.date_prepared or datetime.min.replace(tzinfo=UTC)
            if new_date <= existing_date:
                continue
        results[station] = site

    return results

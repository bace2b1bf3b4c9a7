"""
Tests for the SINEX block stream decoder and record types.

Uses the reduced solution in tests/data/sample.snx and inline excerpts of
IGS files.
"""

import pytest
from datetime import datetime, timezone
from pathlib import Path

from gnss_sitemeta.core.exceptions import FormatError, MandatoryBlockNotFoundError
from gnss_sitemeta.sinex import (
    AntennaRecord,
    BlockStreamDecoder,
    DiscontinuityRecord,
    DiscontinuityType,
    EstimateRecord,
    ObservationTechnique,
    ReceiverRecord,
    SinexBlock,
    SinexHeader,
    SiteIdRecord,
    all_station_coordinates,
    open_sinex,
    read_site_equipment,
)
from gnss_sitemeta.sinex.columns import ColumnDecoder


DATA_DIR = Path(__file__).parent / "data"

UTC = timezone.utc

DISCONTINUITIES = """\
%=SNX 2.02 IGN 21:329:57332 IGN 94:002:00000 21:001:00000 P     0 1 X
*-------------------------------------------------------------------------------
+SOLUTION/DISCONTINUITY
 00NA  A    1 P 00:000:00000 16:302:00000 P - antenna change
 00NA  A    2 P 16:302:00000 00:000:00000 P -
 00NA  A    1 P 00:000:00000 00:000:00000 V -
*
 7601  A    1 P 00:000:00000 22:261:00000 P - unknown
 7601  A    2 P 22:261:00000 00:000:00000 P -
 7601  A    1 P 00:000:00000 00:000:00000 V -
*
 AB01  A    1 P 00:000:00000 11:245:39354 P - EQ M6.9 - 170 km E of Atka, Alaska
 AB01  A    5 P 16:072:65205 21:210:22549 P - EQ M8.2 - 99 km SE of Perryville, Alaska
 AB01  A    6 P 21:210:22549 00:000:00000 P -
 AB01  A    1 P 00:000:00000 13:242:59103 V - EQ M7.0 - 101 km SW of Atka, Alaska
 AB01  A    2 P 13:242:59103 00:000:00000 V -
*
 AB02  A    1 P 00:000:00000 11:175:11380 P - EQ M7.3 - Fox Islands, Aleutian Islands, Alaska
 AB02  A    4 P 20:336:58960 22:011:41743 P - EQ M6.8 - 100 km SE of Nikolski, Alaska
 AB02  A    5 P 22:011:41743 00:000:00000 P -
"""


def decode(record_cls, line):
    return record_cls.decode(ColumnDecoder(line, line_number=1))


@pytest.fixture
def sample_sinex() -> Path:
    """Reduced SINEX solution with ABMF and BRUX."""
    return DATA_DIR / "sample.snx"


class TestHeader:
    """Tests for the %=SNX header line."""

    def test_decode_header(self):
        """All header fields should decode."""
        hdr = decode(
            SinexHeader,
            "%=SNX 2.02 IGN 20:225:43202 IGN 20:208:75600 20:210:43200 C  1577 2 S E",
        )
        assert hdr.version == "2.02"
        assert hdr.agency == "IGN"
        assert hdr.creation_time == datetime(2020, 8, 12, 12, 0, 2, tzinfo=UTC)
        assert hdr.data_provider == "IGN"
        assert hdr.start_time == datetime(2020, 7, 26, 21, 0, 0, tzinfo=UTC)
        assert hdr.end_time == datetime(2020, 7, 28, 12, 0, 0, tzinfo=UTC)
        assert hdr.technique is ObservationTechnique.COMBINED
        assert hdr.num_estimates == 1577
        assert hdr.constraint_code == 2
        assert hdr.solution_types == ["S", "E"]

    def test_empty_input(self):
        with pytest.raises(FormatError, match="empty input"):
            BlockStreamDecoder([])

    def test_missing_percent(self):
        """A file that does not start with '%' is not SINEX."""
        with pytest.raises(FormatError, match="does not start with"):
            BlockStreamDecoder(["+FILE/REFERENCE", "-FILE/REFERENCE"])

    def test_bad_technique(self):
        with pytest.raises(FormatError, match="OBS_TECHNIQUE"):
            decode(
                SinexHeader,
                "%=SNX 2.02 IGN 20:225:43202 IGN 20:208:75600 20:210:43200 Q  1577 2 S E",
            )


class TestRecords:
    """Tests for single record lines."""

    def test_site_id(self):
        rec = decode(
            SiteIdRecord,
            " ABMF  A 97103M001 P Les Abymes - Raizet ai 298 28 20.9  16 15 44.3   -25.6",
        )
        assert rec.code == "ABMF"
        assert rec.point_code == "A"
        assert rec.domes_number == "97103M001"
        assert rec.technique is ObservationTechnique.GPS
        assert rec.description == "Les Abymes - Raizet ai"
        assert rec.longitude == "298 28 20.9"
        assert rec.latitude == "16 15 44.3"
        assert rec.height == pytest.approx(-25.6)

    def test_antenna(self):
        """Radome is read from the end of the description."""
        rec = decode(
            AntennaRecord,
            " ABMF  A ---- P 12:024:43200 00:000:00000 TRM57971.00     NONE 14411",
        )
        assert rec.site_code == "ABMF"
        assert rec.point_code == "A"
        assert rec.solution_id == ""
        assert rec.technique is ObservationTechnique.GPS
        assert rec.date_installed == datetime(2012, 1, 24, 12, 0, 0, tzinfo=UTC)
        assert rec.date_removed is None
        assert rec.antenna_type == "TRM57971.00     NONE"
        assert rec.radome_type == "NONE"
        assert rec.serial_number == "14411"

    def test_antenna_without_radome(self):
        rec = decode(
            AntennaRecord,
            " ABMF  A ---- P 12:024:43200 00:000:00000 TRM57971.00          14411",
        )
        assert rec.antenna_type == "TRM57971.00"
        assert rec.radome_type == ""

    def test_receiver(self):
        rec = decode(
            ReceiverRecord,
            " ABMF  A ---- P 20:038:36000 00:000:00000 SEPT POLARX5         45014 5.3.2",
        )
        assert rec.site_code == "ABMF"
        assert rec.point_code == "A"
        assert rec.solution_id == ""
        assert rec.technique is ObservationTechnique.GPS
        assert rec.date_installed == datetime(2020, 2, 7, 10, 0, 0, tzinfo=UTC)
        assert rec.date_removed is None
        assert rec.receiver_type == "SEPT POLARX5"
        assert rec.serial_number == "45014"
        assert rec.firmware_version == "5.3.2"

    def test_receiver_placeholders(self):
        """Placeholder dashes decode to empty strings."""
        rec = decode(
            ReceiverRecord,
            " ALX2  A ---- P 08:063:00000 00:000:00000 LEICA GRX1200GGPRO   ----  ----",
        )
        assert rec.receiver_type == "LEICA GRX1200GGPRO"
        assert rec.serial_number == ""
        assert rec.firmware_version == ""

    def test_receiver_to_model(self):
        rec = decode(
            ReceiverRecord,
            " ABMF  A ---- P 20:038:36000 00:000:00000 SEPT POLARX5         45014 5.3.2",
        )
        recv = rec.to_receiver()
        assert recv.receiver_type == "SEPT POLARX5"
        assert recv.date_installed == rec.date_installed
        assert recv.time_range.is_open

    def test_estimate(self):
        rec = decode(
            EstimateRecord,
            "     1 STAX   ABMF  A    3 20:209:43200 m    2  2.91978579389317e+06 8.34951e-04",
        )
        assert rec.index == 1
        assert rec.parameter_type == "STAX"
        assert rec.site_code == "ABMF"
        assert rec.point_code == "A"
        assert rec.solution_id == "3"
        assert rec.unit == "m"
        assert rec.constraint_code == "2"
        assert rec.epoch == datetime(2020, 7, 27, 12, 0, 0, tzinfo=UTC)
        assert rec.value == 2.91978579389317e+06
        assert rec.stddev == 8.34951e-04

    def test_estimate_without_stddev(self):
        rec = decode(
            EstimateRecord,
            "     1 STAX   ABMF  A    3 20:209:43200 m    2  2.91978579389317e+06",
        )
        assert rec.stddev == 0.0

    def test_discontinuity(self):
        rec = decode(
            DiscontinuityRecord,
            " AB02  A    2 P 11:175:11380 15:208:17386 P - EQ M6.9 - Fox Islands, Aleutian Islands, Alaska",
        )
        assert rec.site_code == "AB02"
        assert rec.point_code == "A"
        assert rec.index == 2
        assert rec.discontinuity_type is DiscontinuityType.POSITION
        assert rec.start_time == datetime(2011, 6, 24, 3, 9, 40, tzinfo=UTC)
        assert rec.end_time == datetime(2015, 7, 27, 4, 49, 46, tzinfo=UTC)
        assert rec.event == "EQ M6.9 - Fox Islands, Aleutian Islands, Alaska"

    def test_bad_record_names_field(self):
        with pytest.raises(FormatError) as exc_info:
            decode(
                EstimateRecord,
                "     x STAX   ABMF  A    3 20:209:43200 m    2  2.91978579389317e+06 8.34951e-04",
            )
        assert exc_info.value.field == "INDEX"


class TestBlockStreamDecoder:
    """Tests for block and record navigation."""

    def test_file_reference(self, sample_sinex):
        """FILE/REFERENCE is read on open."""
        with open_sinex(sample_sinex) as dec:
            assert dec.header.agency == "ROB"
            assert dec.header.num_estimates == 7
            ref = dec.file_reference
            assert ref.description == "Royal Observatory of Belgium"
            assert ref.software == "Bernese GNSS Software 5.2"
            assert ref.input == "EPN daily RINEX"

    def test_blocks(self, sample_sinex):
        """Remaining block names are reported in order."""
        with open_sinex(sample_sinex) as dec:
            names = list(dec.blocks())
        assert names == [
            "FILE/COMMENT",
            "SITE/ID",
            "SITE/RECEIVER",
            "SITE/ANTENNA",
            "SOLUTION/ESTIMATE",
        ]

    def test_block_lines_skip_comments(self, sample_sinex):
        with open_sinex(sample_sinex) as dec:
            assert dec.go_to_block(SinexBlock.SITE_RECEIVER)
            lines = list(dec.block_lines())
        assert len(lines) == 3
        assert all(line.startswith(" ") for line in lines)

    def test_records(self, sample_sinex):
        with open_sinex(sample_sinex) as dec:
            assert dec.go_to_block(SinexBlock.SOLUTION_ESTIMATE)
            estimates = list(dec.records(EstimateRecord))
        assert [e.index for e in estimates] == [1, 2, 3, 4, 5, 6, 7]
        assert estimates[3].unit == "m/y"

    def test_go_to_missing_block(self, sample_sinex):
        with open_sinex(sample_sinex) as dec:
            assert not dec.go_to_block(SinexBlock.SOLUTION_DISCONTINUITY)

    def test_go_to_block_is_forward_only(self, sample_sinex):
        """Blocks already passed cannot be reached again."""
        with open_sinex(sample_sinex) as dec:
            assert dec.go_to_block(SinexBlock.SITE_ANTENNA)
            assert not dec.go_to_block(SinexBlock.SITE_ID)

    def test_unread_records_are_skipped(self, sample_sinex):
        with open_sinex(sample_sinex) as dec:
            assert dec.go_to_block(SinexBlock.SITE_ID)
            assert dec.advance_record()
            assert dec.advance_block()
            assert dec.block == "SITE/RECEIVER"

    def test_block_without_end_marker(self):
        """A new block begin also ends the previous block."""
        lines = [
            "%=SNX 2.02 IGN 20:225:43202 IGN 20:208:75600 20:210:43200 C     0 2 S",
            "+FILE/REFERENCE",
            " DESCRIPTION        test",
            "+SITE/ID",
            " ABMF  A 97103M001 P Les Abymes - Raizet ai 298 28 20.9  16 15 44.3   -25.6",
            "-SITE/ID",
        ]
        dec = BlockStreamDecoder(lines)
        assert dec.file_reference.description == "test"
        assert dec.advance_block()
        assert dec.block == "SITE/ID"
        assert [r.code for r in dec.records(SiteIdRecord)] == ["ABMF"]

    def test_invalid_file_reference_key(self):
        lines = [
            "%=SNX 2.02 IGN 20:225:43202 IGN 20:208:75600 20:210:43200 C     0 2 S",
            "+FILE/REFERENCE",
            " COMMENT            not a reference key",
            "-FILE/REFERENCE",
        ]
        with pytest.raises(FormatError, match="invalid key"):
            BlockStreamDecoder(lines)

    def test_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            with open_sinex(tmp_path / "missing.snx"):
                pass


class TestDiscontinuityFile:
    """Discontinuity files carry no FILE/REFERENCE block."""

    def test_strict_mode_requires_file_reference(self):
        with pytest.raises(MandatoryBlockNotFoundError) as exc_info:
            BlockStreamDecoder(DISCONTINUITIES.splitlines())
        assert exc_info.value.expected_block == "FILE/REFERENCE"
        assert exc_info.value.found_block == "SOLUTION/DISCONTINUITY"

    def test_lenient_mode_reads_all_records(self):
        """The first block stays available to the caller."""
        dec = BlockStreamDecoder(DISCONTINUITIES.splitlines(), require_file_reference=False)
        assert dec.file_reference is None
        assert dec.header.num_estimates == 0
        assert dec.header.start_time == datetime(1994, 1, 2, tzinfo=UTC)

        assert dec.go_to_block(SinexBlock.SOLUTION_DISCONTINUITY)
        records = list(dec.records(DiscontinuityRecord))
        assert len(records) == 14

        velocity = [r for r in records if r.discontinuity_type is DiscontinuityType.VELOCITY]
        assert len(velocity) == 4
        assert records[0].event == "antenna change"
        assert records[0].start_time is None
        assert records[1].event == ""

    def test_next_block_after_reading_first_block(self):
        """Records read straight after construction do not keep the first block pending."""
        lines = [
            "%=SNX 2.02 IGN 21:329:57332 IGN 94:002:00000 21:001:00000 P     0 1 X",
            "+SOLUTION/DISCONTINUITY",
            " AB02  A    1 P 00:000:00000 11:175:11380 P - EQ M7.3 - Fox Islands",
            "-SOLUTION/DISCONTINUITY",
            "+SITE/ID",
            " ABMF  A 97103M001 P Les Abymes - Raizet ai 298 28 20.9  16 15 44.3   -25.6",
            "-SITE/ID",
        ]
        dec = BlockStreamDecoder(lines, require_file_reference=False)
        records = list(dec.records(DiscontinuityRecord))
        assert len(records) == 1

        assert dec.advance_block()
        assert dec.block == "SITE/ID"
        assert dec.line_number == 5
        assert not dec.advance_block()


class TestStationCoordinates:
    """Tests for grouping coordinate estimates."""

    def test_all_station_coordinates(self, sample_sinex):
        """STAX/STAY/STAZ of a station form one coordinate triple."""
        with open_sinex(sample_sinex) as dec:
            dec.go_to_block(SinexBlock.SOLUTION_ESTIMATE)
            coordinates = list(all_station_coordinates(dec.records(EstimateRecord)))

        assert [c.site_code for c in coordinates] == ["ABMF", "BRUX"]
        abmf = coordinates[0]
        assert abmf.solution_id == "3"
        assert abmf.values == [2.91978579389317e+06, -5.38374958595241e+06, 1.77460302120480e+06]
        assert abmf.stddev[0] == 8.34951e-04
        assert abmf.epoch == datetime(2020, 7, 27, 12, tzinfo=UTC)

    def test_no_estimates(self):
        assert list(all_station_coordinates([])) == []


class TestSiteEquipment:
    """Tests for building sites from SITE blocks."""

    def test_read_site_equipment(self, sample_sinex):
        with open_sinex(sample_sinex) as dec:
            sites = read_site_equipment(dec)

        assert sorted(sites) == ["ABMF", "BRUX"]
        abmf = sites["ABMF"]
        assert abmf.station_id == "ABMF"
        assert abmf.domes_number == "97103M001"
        assert abmf.location.city == "Les Abymes - Raizet ai"
        assert [r.receiver_type for r in abmf.receivers] == ["TRIMBLE NETR9", "SEPT POLARX5"]
        assert len(abmf.antennas) == 1
        assert abmf.antennas[0].radome_type == "NONE"

        brux = sites["BRUX"]
        assert brux.receivers[0].date_installed == datetime(2020, 2, 25, 13, 30, tzinfo=UTC)
        assert brux.antennas[0].serial_number == "00464"

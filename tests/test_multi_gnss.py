"""Tests for satellite system parsing."""

import pytest

from gnss_sitemeta.utils.multi_gnss import (
    SatelliteSystem,
    format_satellite_systems,
    parse_satellite_systems,
)


class TestParseSatelliteSystems:
    """Tests for the sitelog 'Satellite System' notation."""

    def test_single_system(self):
        assert parse_satellite_systems("GPS") == [SatelliteSystem.GPS]

    def test_multiple_systems_keep_order(self):
        """Systems are returned in the order written."""
        systems = parse_satellite_systems("GPS+GLO+GAL+BDS+SBAS")
        assert systems == [
            SatelliteSystem.GPS,
            SatelliteSystem.GLO,
            SatelliteSystem.GAL,
            SatelliteSystem.BDS,
            SatelliteSystem.SBAS,
        ]

    def test_aliases_are_normalized(self):
        """Long names seen in old logs map to the designators."""
        systems = parse_satellite_systems("GPS+GLONASS+Galileo")
        assert systems == [SatelliteSystem.GPS, SatelliteSystem.GLO, SatelliteSystem.GAL]

    def test_slash_separator(self):
        systems = parse_satellite_systems("GPS/GLO")
        assert systems == [SatelliteSystem.GPS, SatelliteSystem.GLO]

    def test_whitespace_around_tokens(self):
        systems = parse_satellite_systems(" GPS + QZSS ")
        assert systems == [SatelliteSystem.GPS, SatelliteSystem.QZSS]

    def test_unknown_system_raises(self):
        """An unknown token should raise ValueError naming it."""
        with pytest.raises(ValueError, match="GPX"):
            parse_satellite_systems("GPS+GPX")

    def test_template_text_raises(self):
        with pytest.raises(ValueError):
            parse_satellite_systems("(GPS+GLO+GAL+BDS+QZSS+SBAS)")


class TestFormatSatelliteSystems:
    """Tests for rendering systems back to sitelog notation."""

    def test_format(self):
        systems = [SatelliteSystem.GPS, SatelliteSystem.GLO, SatelliteSystem.BDS]
        assert format_satellite_systems(systems) == "GPS+GLO+BDS"

    def test_format_parsed_aliases(self):
        systems = parse_satellite_systems("GPS+GLONASS+BEIDOU")
        assert format_satellite_systems(systems) == "GPS+GLO+BDS"

    def test_rinex_abbreviations(self):
        assert SatelliteSystem.GPS.abbreviation == "G"
        assert SatelliteSystem.GLO.abbreviation == "R"
        assert SatelliteSystem.BDS.abbreviation == "C"
